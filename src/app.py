"""Inventory FastAPI application.

Serves the catalog (items and variants) and order creation over HTTP. Every
request runs inside the inventory domain context.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the Protean config overlay (e.g. "test", "production").
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from inventory.domain import inventory
from inventory.utils.logging import add_context, clear_context, configure_logging

configure_logging(file_prefix="inventory")
inventory.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Inventory API",
    description="Catalog items, variants and orders with stock reservation",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the inventory domain context and bind a request id for logging."""
    clear_context()
    add_context(request_id=request.headers.get("X-Request-ID") or uuid4().hex, path=request.url.path)
    with inventory.domain_context():
        response = await call_next(request)
    return response


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from inventory.api import item_router, order_router, register_error_handlers, variant_router  # noqa: E402

app.include_router(item_router)
app.include_router(variant_router)
app.include_router(order_router)
register_error_handlers(app)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domains": {
                "inventory": {"name": inventory.name},
            },
        }
    )
