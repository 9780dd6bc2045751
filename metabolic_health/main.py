import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from metabolic_health.api import auth, content, dashboard, medications, symptoms
from metabolic_health.config import get_secret_key, settings
from metabolic_health.core.errors import ServiceError, Unauthenticated, ValidationError
from metabolic_health.db.seed import seed_content
from metabolic_health.db.storage import Storage, open_storage

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def _field_errors(exc: RequestValidationError) -> list:
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        errors.append({"field": ".".join(loc), "message": err.get("msg", "invalid")})
    return errors


def create_app(storage: Optional[Storage] = None) -> FastAPI:
    """
    Build the API. With `storage` given (tests), that handle is used as-is;
    otherwise the backend from settings is opened on startup and closed on shutdown.
    """
    app = FastAPI(
        title=settings.app_name,
        description="GLP-1 treatment companion: symptom log, medications, education, progress",
        version="0.1.0",
        debug=settings.debug,
    )
    app.state.storage = storage

    @app.on_event("startup")
    def on_startup():
        # Fail fast on a missing production secret rather than on first login
        get_secret_key()
        if app.state.storage is None:
            app.state.storage = open_storage(settings)
            logger.info("Opened %s storage", app.state.storage.name)
            if settings.storage_backend == "memory" or settings.seed_on_startup:
                seed_content(app.state.storage)

    @app.on_event("shutdown")
    def on_shutdown():
        if storage is None and app.state.storage is not None:
            app.state.storage.close()
            app.state.storage = None
            logger.info("Storage closed")

    # Register routers
    app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
    app.include_router(symptoms.router, prefix="/api/side-effects", tags=["Symptoms"])
    app.include_router(medications.router, prefix="/api/medications", tags=["Medications"])
    app.include_router(content.router, prefix="/api/content", tags=["Content"])
    app.include_router(dashboard.router, prefix="/api/dashboard", tags=["Dashboard"])

    @app.get("/health")
    async def health_check():
        return {"status": "ok"}

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthenticated) else None
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        err = ValidationError(errors=_field_errors(exc))
        return JSONResponse(status_code=err.status_code, content=err.to_dict())

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        """Ensure all errors return JSON; details stay in the server log."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={"message": "Internal server error", "error": "internal_error"},
        )

    return app


app = create_app()


def run_server(host: str = "0.0.0.0", port: int = 8000):
    """Serve the API with uvicorn (`metabolic-health` console script, or `python -m metabolic_health.main`)."""
    import uvicorn

    uvicorn.run("metabolic_health.main:app", host=host, port=port)


if __name__ == "__main__":
    run_server()
