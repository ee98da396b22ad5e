import logging
from urllib.parse import urlparse

import uvicorn
from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from task_api.api.exception_handlers import register_exception_handlers
from task_api.api.router import api_router
from task_api.core.config import Settings, settings as default_settings
from task_api.core.logging import configure_logging
from task_api.db.base import create_db_engine, create_session_factory

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or default_settings
    configure_logging(settings.log_level)

    app = FastAPI(title="Task API")
    app.state.settings = settings

    # One engine (and pool) per app; sessions are handed out by api.deps.get_db
    engine = create_db_engine(settings.database_url, pool_size=settings.db_pool_size)
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)

    if settings.frontend_url:
        parsed = urlparse(settings.frontend_url)
        origin = f"{parsed.scheme}://{parsed.netloc}"
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[origin],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_exception_handlers(app)
    app.include_router(api_router)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    logger.info("Application created")
    return app


app = create_app()


def run() -> None:
    """Serve the app with uvicorn on SERVER_HOST:SERVER_PORT."""
    logger.info(
        "Starting HTTP server on http://%s:%d",
        default_settings.server_host,
        default_settings.server_port,
    )
    uvicorn.run(
        app,
        host=default_settings.server_host,
        port=default_settings.server_port,
        log_config=None,
    )


if __name__ == "__main__":
    run()
