from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from briefwriter.api.routes.generation import generation_router
from briefwriter.api.routes.health import health_router
from briefwriter.config.settings import settings
from briefwriter.core.errors import AccessDeniedError, BriefWriterError, ConflictError, NotFoundError
from briefwriter.core.service import GenerationService
from briefwriter.utils.logger import logger, setup_logger

ERROR_STATUS = {
    NotFoundError: 404,
    AccessDeniedError: 403,
    ConflictError: 409,
}


def create_app(service: GenerationService | None = None):
    setup_logger()  # Ensure logger is set up before FastAPI app initialization
    logger.info(f"Starting {settings.APP_NAME} FastAPI application...")

    app = FastAPI(
        title=settings.APP_NAME,
        version="0.1.0",
        description="Structured assignment generation pipeline",
    )
    app.state.service = service

    app.include_router(health_router, prefix="/api")
    app.include_router(generation_router, prefix="/api")

    @app.exception_handler(BriefWriterError)
    async def briefwriter_error_handler(request: Request, exc: BriefWriterError):
        status_code = ERROR_STATUS.get(type(exc), 500)
        if status_code == 500:
            logger.error(f"Unhandled {type(exc).__name__} on {request.url.path}: {exc}")
        return JSONResponse(status_code=status_code, content={"error": type(exc).__name__, "detail": str(exc)})

    @app.on_event("startup")
    async def startup_event():
        logger.info("FastAPI app startup complete.")

    @app.on_event("shutdown")
    async def shutdown_event():
        if app.state.service is not None:
            app.state.service.runner.shutdown(wait=False)
        logger.info("FastAPI app shutdown complete.")

    return app


app = create_app()
