"""Conversion API router composition for in-memory export conversion."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from coinledger.domain import CoinLedgerError
from coinledger.domain.money import money_format
from coinledger.jobs import ConversionJobOrchestrator, ConversionResult

logger = logging.getLogger(__name__)


def api_create_conversion_router(conversion_orchestrator: ConversionJobOrchestrator) -> APIRouter:
    """Create conversion router that turns posted CSV text into ledger text.

    Args:
        conversion_orchestrator: Job orchestrator running the conversion pipeline.

    Returns:
        APIRouter: Router exposing conversion endpoints.

    Raises:
        ValueError: Raised when dependencies are invalid.
    """

    if conversion_orchestrator is None:
        raise ValueError("conversion_orchestrator must not be None")

    router = APIRouter(prefix="/conversions", tags=["conversions"])

    @router.post("")
    async def api_conversion_create(request: Request) -> JSONResponse:
        """Convert one posted export document.

        Args:
            request: Incoming request whose body is the CSV export text.

        Returns:
            JSONResponse: Ledger text and run summary, or a typed error envelope.

        Raises:
            RuntimeError: Raised when conversion fails unexpectedly.
        """

        body_bytes = await request.body()
        try:
            csv_text = body_bytes.decode("utf-8-sig")
        except UnicodeDecodeError:
            payload = {
                "status": "error",
                "code": "INVALID_ENCODING",
                "message": "request body must be UTF-8 text",
            }
            return JSONResponse(content=payload, status_code=status.HTTP_400_BAD_REQUEST)

        try:
            result = conversion_orchestrator.job_convert_text(csv_text)
        except CoinLedgerError as error:
            logger.warning("Rejected conversion request [%s]: %s", error.error_code, error)
            payload = {
                "status": "error",
                "code": error.error_code,
                "message": str(error),
            }
            return JSONResponse(content=payload, status_code=422)

        payload = {
            "status": "ok",
            "ledger": result.ledger_text,
            "summary": api_serialize_conversion_summary(result),
        }
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    return router


def api_serialize_conversion_summary(result: ConversionResult) -> dict[str, object]:
    """Serialize conversion counters to a JSON payload.

    Decimal values are rendered as strings to keep exact precision.

    Args:
        result: Conversion outcome.

    Returns:
        dict[str, object]: JSON-serializable summary payload.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    return {
        "trade_count": result.trade_count,
        "buy_count": result.buy_count,
        "sell_count": result.sell_count,
        "skipped_row_count": result.skipped_row_count,
        "realized_gain_total": money_format(result.realized_gain_total),
        "open_quantity": money_format(result.open_quantity),
        "open_lot_count": result.open_lot_count,
        "lot_policy": result.lot_policy_name,
    }


__all__ = ["api_create_conversion_router", "api_serialize_conversion_summary"]
