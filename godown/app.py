import logging
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from godown.application import configure_services, get_entity_store
from godown.core.logging_config import configure_logging, request_id
from godown.core.settings import Settings, load_settings
from godown.routes import analytics, catalog, expenses, sales, work_entries

logger = logging.getLogger(__name__)


def _seed_sources(settings: Settings) -> None:
    store = get_entity_store()
    if store.list_data_sources():
        return
    for item in settings.data_sources:
        store.add_data_source(item["name"], item["sheet_url"])
    if settings.data_sources:
        logger.info("Registered %d data sources from configuration", len(settings.data_sources))


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or load_settings()
    configure_logging(settings.log_level)
    configure_services(settings)
    _seed_sources(settings)

    app = FastAPI(title="Godown Operations Dashboard API", version="0.1.0")

    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        rid = uuid4().hex
        token = request_id.set(rid)
        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = rid
        finally:
            request_id.reset(token)
        return response

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(catalog.router, prefix="/api")
    app.include_router(work_entries.router, prefix="/api")
    app.include_router(expenses.router, prefix="/api")
    app.include_router(analytics.router, prefix="/api")
    app.include_router(sales.router, prefix="/api")

    @app.get("/", include_in_schema=False)
    async def root() -> JSONResponse:
        """Provide a lightweight landing page for container checks."""
        return JSONResponse(
            {
                "message": "Godown Operations Dashboard API",
                "docs": "/docs",
                "health": "/api/employees",
            }
        )

    return app


app = create_app()
