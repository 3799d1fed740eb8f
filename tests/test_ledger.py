import threading

import pytest

from kitchen_ledger.core import auth as auth_core, ledger, materials
from kitchen_ledger.core.errors import StoreWriteError
from kitchen_ledger.db import documents
from kitchen_ledger.db.models import DEFAULT_SUPPLIER, RawMaterial


@pytest.fixture
def user_id(client, request):
    return auth_core.create_user(f"ledger-{request.node.name}", "pw")


def test_first_access_creates_default_document(user_id):
    assert documents.load(user_id) is None
    data = ledger.get_user_data(user_id)
    assert data.raw_materials == []
    assert data.suppliers == [DEFAULT_SUPPLIER]
    assert documents.load(user_id)["suppliers"] == [DEFAULT_SUPPLIER]


def test_apply_persists_only_changed_collections(user_id):
    ledger.get_user_data(user_id)
    data = ledger.apply(user_id, materials.save_material, RawMaterial(id=None, name="Salt", supplier="Sea"))
    stored = documents.load(user_id)
    assert stored["raw_materials"][0]["name"] == "Salt"
    assert stored["suppliers"] == ["General Supplier", "Sea"]
    assert stored["recipes"] == []
    assert ledger.get_user_data(user_id) == data


def test_failed_write_leaves_snapshot(user_id, monkeypatch):
    before = ledger.get_user_data(user_id)

    def broken_patch(uid, changes):
        raise StoreWriteError("disk full")

    monkeypatch.setattr(documents, "patch", broken_patch)
    with pytest.raises(StoreWriteError):
        ledger.commit(user_id, before, {"suppliers": ["Only"]})
    assert before.suppliers == [DEFAULT_SUPPLIER]
    monkeypatch.undo()
    assert ledger.get_user_data(user_id) == before


def test_commit_rejects_unknown_collections(user_id):
    data = ledger.get_user_data(user_id)
    with pytest.raises(ValueError):
        ledger.commit(user_id, data, {"meal_plans": []})


def test_concurrent_purchases_both_land(user_id):
    data = ledger.apply(user_id, materials.save_material, RawMaterial(id=None, name="Flour"))
    material_id = data.raw_materials[0].id
    barrier = threading.Barrier(2)

    def buy():
        barrier.wait()
        ledger.apply(user_id, materials.purchase_material, material_id, 5, 10, "")

    threads = [threading.Thread(target=buy) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    flour = ledger.get_user_data(user_id).raw_materials[0]
    assert flour.stock == pytest.approx(10)
    assert len(flour.purchase_history) == 2


def test_concurrent_first_access_creates_one_document(user_id):
    barrier = threading.Barrier(4)
    errors = []

    def load():
        barrier.wait()
        try:
            ledger.get_user_data(user_id)
        except Exception as e:
            errors.append(e)

    threads = [threading.Thread(target=load) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert documents.load(user_id)["suppliers"] == [DEFAULT_SUPPLIER]
