import logging
import os
from contextlib import asynccontextmanager
from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, RedirectResponse

from kitchen_ledger.core.errors import (
    DuplicateNameError, InsufficientStockError, LedgerError, NotFoundError,
    OrphanedCompensationError, StoreWriteError, ValidationError,
)
from kitchen_ledger.db.database import init_db
from app.dependencies import verify_session_token, is_public, SESSION_COOKIE
from app.routers import (
    auth, materials, recipes, pantry, waste, sales, fixed_costs, shopping, dashboard, settings,
)

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

STORE_WRITE_MESSAGE = "Could not save your changes. Please reload and try again."


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    # Create the demo account if DEMO_USERNAME is set
    if os.environ.get("DEMO_USERNAME"):
        from demo.seed import seed_if_empty
        seed_if_empty()
    yield


app = FastAPI(title="Kitchen Ledger", lifespan=lifespan)


@app.middleware("http")
async def auth_middleware(request: Request, call_next):
    path = request.url.path
    token = request.cookies.get(SESSION_COOKIE)
    request.state.user_id = verify_session_token(token) if token else None
    if request.state.user_id is None and not is_public(path):
        if path.startswith("/api"):
            return JSONResponse({"detail": "Not signed in"}, status_code=401)
        return RedirectResponse(url="/login", status_code=302)
    return await call_next(request)


def _status_for(exc: LedgerError) -> int:
    if isinstance(exc, ValidationError):
        return 400
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, (DuplicateNameError, OrphanedCompensationError)):
        return 409
    if isinstance(exc, StoreWriteError):
        return 503
    return 400


@app.exception_handler(LedgerError)
async def ledger_error_handler(request: Request, exc: LedgerError):
    status = _status_for(exc)
    if isinstance(exc, StoreWriteError):
        return JSONResponse({"detail": STORE_WRITE_MESSAGE}, status_code=status)
    body = {"detail": str(exc)}
    if isinstance(exc, InsufficientStockError):
        body["shortages"] = [
            {"name": name, "required": required, "available": available}
            for name, required, available in exc.shortages
        ]
    logger.info("%s %s rejected: %s", request.method, request.url.path, exc)
    return JSONResponse(body, status_code=status)


@app.get("/health")
def health():
    return {"status": "ok"}


app.include_router(auth.router)
app.include_router(materials.router)
app.include_router(recipes.router)
app.include_router(pantry.router)
app.include_router(waste.router)
app.include_router(sales.router)
app.include_router(fixed_costs.router)
app.include_router(shopping.router)
app.include_router(dashboard.router)
app.include_router(settings.router)
