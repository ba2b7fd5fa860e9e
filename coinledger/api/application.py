"""FastAPI application factory for the conversion service."""

from fastapi import FastAPI

from coinledger.config import AppSettings
from coinledger.domain import AppMetadata
from coinledger.jobs import ConversionJobOrchestrator

from .routers import api_create_conversion_router, api_create_health_router


def create_api_application(
    settings: AppSettings,
    conversion_orchestrator: ConversionJobOrchestrator,
) -> FastAPI:
    """Create the FastAPI application instance for the service.

    Args:
        settings: Validated application settings used for runtime metadata.
        conversion_orchestrator: Job orchestrator used by conversion endpoints.

    Returns:
        FastAPI: Framework application instance.

    Raises:
        RuntimeError: Raised if application initialization fails.
    """
    metadata = AppMetadata(application_name="coinbase-ledger", environment_name=settings.environment_name)
    application = FastAPI(title="Coinbase Ledger")

    @application.get("/", tags=["foundation"])
    def foundation_index() -> dict[str, str]:
        """Return a minimal service identification payload.

        Returns:
            dict[str, str]: Service name, status, and environment.

        Raises:
            RuntimeError: Raised if route handler cannot produce a response.
        """

        return {
            "service": metadata.application_name,
            "status": "ready",
            "environment": metadata.environment_name,
        }

    application.include_router(api_create_health_router(metadata=metadata))
    application.include_router(api_create_conversion_router(conversion_orchestrator=conversion_orchestrator))

    return application
