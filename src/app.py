"""Ordering FastAPI application.

Web server that processes ordering commands synchronously via HTTP. Every
request runs inside the ordering domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

import uuid

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the config overlay from domain.toml:
#   - unset / "test" → in-memory database, inline broker
#   - "production"   → PostgreSQL via DATABASE_URL
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from ordering.domain import ordering  # noqa: E402
from ordering.utils.logging import add_context, clear_context, configure_logging

configure_logging()
ordering.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Ordering API",
    description="Carts, orders and discount codes",
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
    """Push the ordering domain context and tag log lines with a request id."""
    clear_context()
    add_context(request_id=request.headers.get("X-Request-ID", str(uuid.uuid4())))
    with ordering.domain_context():
        response = await call_next(request)
    return response


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from ordering.api import (  # noqa: E402
    cart_router,
    discount_router,
    order_router,
    register_error_handlers,
)

app.include_router(cart_router)
app.include_router(order_router)
app.include_router(discount_router)
register_error_handlers(app)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domains": {"ordering": {"name": ordering.name}},
        }
    )
