import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.concurrency import run_in_threadpool

from users_api.core.config import Settings, get_settings
from users_api.core.log import configure_logging
from users_api.repositories.json_storage import JsonDocumentStore
from users_api.routers import users as users_router
from users_api.services.seed_service import SeedService
from users_api.services.user_service import UserService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Run the seed before serving so the first request never races it."""
    settings: Settings = app.state.settings
    if settings.seed_on_startup:
        app.state.seed_result = await run_in_threadpool(app.state.seed_service.load_seed)
    else:
        logger.info("Seeding disabled; serving %s as is.", settings.data_file)
    logger.info("API Server is running on %s:%s.", settings.host, settings.port)
    yield


def create_app(settings: Settings | None = None) -> FastAPI:
    """Factory compatible with uvicorn/gunicorn (``--factory``)."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="Users JSON API", lifespan=lifespan)
    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(settings.cors_origins),
            allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            allow_headers=["*"],
        )

    store = JsonDocumentStore(settings.data_file)
    app.state.settings = settings
    app.state.store = store
    app.state.seed_service = SeedService(store, settings.seed_url, timeout=settings.seed_timeout_seconds)
    app.state.seed_result = None
    app.state.user_service = UserService(store, serialize_writes=settings.serialize_writes)

    @app.get("/health")
    def health(request: Request):
        seed = request.app.state.seed_result
        return {
            "status": "ok",
            "seeded": bool(seed and seed.ok),
            "seed_error": seed.error if seed else None,
            "data_file_present": request.app.state.store.exists(),
        }

    app.include_router(users_router.router)
    return app
