"""Pantry (finished goods) — packaging, transformation and deletion.

Packaging and transformation move value, they never create or destroy it:
the cost basis of the consumed source units becomes the cost basis of the new
units.  A product with the same name and type is topped up and re-averaged
rather than duplicated.
"""

import logging
from dataclasses import replace

from kitchen_ledger.core import stock
from kitchen_ledger.core.errors import (
    InsufficientStockError, NotFoundError, OrphanedCompensationError, ValidationError,
)
from kitchen_ledger.db.models import SellableProduct, UserData, find_by_id, new_id

logger = logging.getLogger(__name__)


def _get_product(data: UserData, product_id: str) -> SellableProduct:
    product = find_by_id(data.sellable_products, product_id)
    if product is None:
        raise NotFoundError("Product", product_id)
    return product


def _find_named(products: list, name: str, product_type: str):
    key = name.strip().lower()
    return next((p for p in products if p.type == product_type and p.name.lower() == key), None)


def _merge_or_append(products: list, candidate: SellableProduct) -> list:
    """Top up a like-named product of the same type (weighted-average cost) or append candidate."""
    existing = _find_named(products, candidate.name, candidate.type)
    if existing is None:
        return [*products, replace(candidate, id=new_id())]
    merged = replace(
        existing,
        quantity_in_stock=existing.quantity_in_stock + candidate.quantity_in_stock,
        cost=stock.weighted_average(
            existing.quantity_in_stock, existing.cost,
            candidate.quantity_in_stock, candidate.cost,
        ),
        pvp=candidate.pvp,
        source_product_id=candidate.source_product_id,
        pack_size=candidate.pack_size if candidate.pack_size is not None else existing.pack_size,
        transformation_note=candidate.transformation_note or existing.transformation_note,
    )
    return [merged if p.id == existing.id else p for p in products]


def package_product(
    data: UserData,
    source_product_id: str,
    pack_size: float,
    pack_count: float,
    name: str,
    pvp: float,
) -> dict:
    """Bundle pack_count packs of pack_size source units into a PACKAGE product."""
    if pack_size <= 0 or pack_count <= 0:
        raise ValidationError("Pack size and number of packs must be greater than zero.")
    if not name or not name.strip():
        raise ValidationError("Package name is required.")
    if pvp < 0:
        raise ValidationError("Price cannot be negative.")
    source = _get_product(data, source_product_id)
    units = pack_size * pack_count
    if not stock.has_enough(source.quantity_in_stock, units):
        raise InsufficientStockError(
            f"Not enough '{source.name}' in stock to make {pack_count:g} packs.",
            [(source.name, units, source.quantity_in_stock)],
        )

    products = [
        replace(p, quantity_in_stock=stock.deduct(p.quantity_in_stock, units)) if p.id == source.id else p
        for p in data.sellable_products
    ]
    package = SellableProduct(
        id=None,
        name=name.strip(),
        type="PACKAGE",
        quantity_in_stock=pack_count,
        cost=source.cost * pack_size,
        pvp=pvp,
        source_product_id=source.id,
        pack_size=pack_size,
    )
    logger.info("Packaged %s x %s of product %s as '%s'", pack_count, pack_size, source.id, package.name)
    return {"sellable_products": _merge_or_append(products, package)}


def transform_product(
    data: UserData,
    source_product_id: str,
    quantity: float,
    name: str,
    new_yield: float,
    pvp: float,
) -> dict:
    """Turn quantity source units into new_yield units of a TRANSFORMED product.

    Unit cost is source.cost * quantity / new_yield, so the batch keeps the
    consumed source value.
    """
    if quantity <= 0:
        raise ValidationError("Quantity to transform must be greater than zero.")
    if new_yield <= 0:
        raise ValidationError("New product yield must be greater than zero.")
    if not name or not name.strip():
        raise ValidationError("Product name is required.")
    if pvp < 0:
        raise ValidationError("Price cannot be negative.")
    source = _get_product(data, source_product_id)
    if not stock.has_enough(source.quantity_in_stock, quantity):
        raise InsufficientStockError(
            f"Not enough '{source.name}' in stock.",
            [(source.name, quantity, source.quantity_in_stock)],
        )

    products = [
        replace(p, quantity_in_stock=stock.deduct(p.quantity_in_stock, quantity)) if p.id == source.id else p
        for p in data.sellable_products
    ]
    transformed = SellableProduct(
        id=None,
        name=name.strip(),
        type="TRANSFORMED",
        quantity_in_stock=new_yield,
        cost=source.cost * quantity / new_yield,
        pvp=pvp,
        source_product_id=source.id,
        transformation_note=f"{quantity:g} of '{source.name}'",
    )
    logger.info("Transformed %s of product %s into %s '%s'", quantity, source.id, new_yield, transformed.name)
    return {"sellable_products": _merge_or_append(products, transformed)}


def delete_product(data: UserData, product_id: str, force: bool = False) -> dict:
    """Delete a pantry product.  Deleting a package returns its units to the source product."""
    product = _get_product(data, product_id)
    remaining = [p for p in data.sellable_products if p.id != product_id]

    if product.type == "PACKAGE" and product.source_product_id and product.pack_size:
        units_back = product.quantity_in_stock * product.pack_size
        source = find_by_id(remaining, product.source_product_id)
        if source is None and units_back > 0:
            if not force:
                raise OrphanedCompensationError("package", product_id, product.source_product_id)
            logger.warning("Dropping package %s without returning %s units to missing source %s",
                           product_id, units_back, product.source_product_id)
        elif source is not None:
            remaining = [
                replace(p, quantity_in_stock=p.quantity_in_stock + units_back) if p.id == source.id else p
                for p in remaining
            ]
    logger.info("Deleted product %s", product_id)
    return {"sellable_products": remaining}


def pantry_value(products: list) -> float:
    return sum(p.quantity_in_stock * p.cost for p in products)
