"""Health endpoint router composition."""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from coinledger.domain import AppMetadata


def api_create_health_router(metadata: AppMetadata) -> APIRouter:
    """Create health-check router reporting application liveness.

    Args:
        metadata: Static application metadata included in the payload.

    Returns:
        APIRouter: Router exposing `/health` endpoint.

    Raises:
        ValueError: Raised when metadata is invalid.
    """

    if metadata is None:
        raise ValueError("metadata must not be None")

    router = APIRouter(tags=["health"])

    @router.get("/health")
    def api_health_status() -> JSONResponse:
        """Return application health state.

        Returns:
            JSONResponse: Deterministic health payload for operational checks.

        Raises:
            RuntimeError: This handler does not raise runtime errors.
        """

        payload = {
            "status": "ok",
            "app": "up",
            "environment": metadata.environment_name,
        }
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    return router
