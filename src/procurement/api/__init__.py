"""Procurement domain API package."""

from procurement.api.errors import register_procurement_handlers
from procurement.api.routes import catalog_router, draft_router, order_router, user_router

__all__ = ["catalog_router", "draft_router", "order_router", "user_router", "register_procurement_handlers"]
