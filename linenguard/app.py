import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from linenguard.application import InspectionService, configure_inspection_service
from linenguard.core.logging import init_logging
from linenguard.core.settings import load_settings
from linenguard.infrastructure import JsonFileStorage, ResultStore, UnconfiguredClassifier, configure_classifier
from linenguard.infrastructure.gemini import GeminiBedClassifier
from linenguard.routes import dashboard, inspections, reviews

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    settings = load_settings()
    init_logging(settings.log_level)
    app = FastAPI(title="LinenGuard Inspection API", version="0.0.1")

    if settings.api_key:
        classifier = GeminiBedClassifier(
            settings.api_key,
            model=settings.model,
            api_base=settings.api_base,
            timeout=settings.timeout,
        )
        configure_classifier(classifier)
        logger.info("Gemini classifier configured (model %s)", settings.model)
    else:
        configure_classifier(UnconfiguredClassifier())
        logger.warning("No classifier API key configured; photo checks will be rejected")

    store = ResultStore(JsonFileStorage(settings.data_root))
    configure_inspection_service(InspectionService(store, image_root=settings.data_root))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(inspections.router, prefix="/api")
    app.include_router(reviews.router, prefix="/api")
    app.include_router(dashboard.router, prefix="/api")

    @app.get("/", include_in_schema=False)
    async def root() -> JSONResponse:
        """Provide a lightweight landing page for container checks."""
        return JSONResponse(
            {
                "message": "LinenGuard Inspection API",
                "docs": "/docs",
                "health": "/api/dashboard/stats",
            }
        )

    return app


app = create_app()
