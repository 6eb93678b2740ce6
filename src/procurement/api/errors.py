"""HTTP mapping for procurement business errors."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from procurement.exceptions import ProcurementError
from procurement.utils.logging import get_logger

logger = get_logger(__name__)


def register_procurement_handlers(app: FastAPI) -> None:
    """Render every ``ProcurementError`` as ``{"error", "code", ...}`` with its status code."""

    @app.exception_handler(ProcurementError)
    async def procurement_error_handler(request: Request, exc: ProcurementError) -> JSONResponse:
        logger.info(
            "Request rejected",
            path=request.url.path,
            code=exc.code,
            status_code=exc.status_code,
        )
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())
