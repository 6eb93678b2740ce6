"""Procurement FastAPI application.

Web server that processes procurement commands synchronously via HTTP.
Every request runs inside the procurement domain context.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the config overlay (database, broker, event store).
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from procurement.domain import procurement
from procurement.utils.logging import add_context, clear_context
from protean.integrations.fastapi import register_exception_handlers

procurement.init()

# Paths served by the procurement routers
_DOMAIN_PREFIXES = ("/drafts", "/orders", "/users")


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Procurement API",
    description="Store-to-supplier draft carts, orders, messages and ratings",
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
    """Push the procurement domain context for domain routes.

    The calling actor, when known, is bound to the log context for the
    duration of the request.
    """
    if request.url.path.startswith(_DOMAIN_PREFIXES):
        actor_id = request.headers.get("x-actor-id")
        if actor_id:
            add_context(actor_id=actor_id, actor_role=request.headers.get("x-actor-role"))
        try:
            with procurement.domain_context():
                response = await call_next(request)
        finally:
            clear_context()
        return response
    # Health check, docs
    return await call_next(request)


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from procurement.api import (  # noqa: E402
    catalog_router,
    draft_router,
    order_router,
    register_procurement_handlers,
    user_router,
)

app.include_router(draft_router)
app.include_router(order_router)
app.include_router(user_router)
app.include_router(catalog_router)

register_exception_handlers(app)
register_procurement_handlers(app)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domains": {
                "procurement": {"name": procurement.name},
            },
        }
    )
