# grocery_app/main.py
from contextlib import asynccontextmanager
import logging

from fastapi.middleware.cors import CORSMiddleware
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from grocery_app.core.config import get_settings
from grocery_app.core.errors import (
    ChecklistConflictError,
    GroceryError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from grocery_app.database import create_db_and_tables

# Routers
from grocery_app.routers.barcode import router as barcode_router
from grocery_app.routers.cart import router as cart_router
from grocery_app.routers.catalog import router as catalog_router
from grocery_app.routers.checklist import router as checklist_router

settings = get_settings()

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Open the embedded database, migrate the cart table, seed the
        catalog on first run.

    Shutdown:
      - No special cleanup needed for the SQLite engine.
    """
    logger.info("🔄 Startup: Opening grocery database...")
    try:
        create_db_and_tables()
        logger.info("✅ Startup: DB ready, schema up to date.")
    except Exception as e:
        logger.error(f"❌ Startup: DB initialisation FAILED: {e}")
        raise
    yield


app = FastAPI(
    title=settings.PROJECT_NAME or "Grocery Cart Assistant API",
    version="0.1.0",
    lifespan=lifespan,
)


# --- Error mapping ---
# Every failure comes back as a correctable response; none is fatal.

_STATUS_BY_ERROR: dict[type[GroceryError], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ChecklistConflictError: status.HTTP_409_CONFLICT,
    StorageError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


@app.exception_handler(GroceryError)
async def grocery_error_handler(request: Request, exc: GroceryError):
    code = _STATUS_BY_ERROR.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
    if code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=code, content={"detail": exc.message})


# --- CORS configuration ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Versioned API prefix, e.g. /api/v1
app.include_router(catalog_router, prefix=settings.API_V1_STR)
app.include_router(cart_router, prefix=settings.API_V1_STR)
app.include_router(checklist_router, prefix=settings.API_V1_STR)
app.include_router(barcode_router, prefix=settings.API_V1_STR)


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "grocery-cart-assistant"}
