import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from files_manager.core.config import Settings, get_settings
from files_manager.core.errors import FilesManagerError
from files_manager.logic.credentials import CredentialVerifier
from files_manager.logic.files import FileHierarchyStore
from files_manager.logic.sessions import SessionManager
from files_manager.logic.users import UserDirectory
from files_manager.models.database import Database
from files_manager.routers import app as app_routes, auth, files, users
from files_manager.storage.blobs import build_blob_store
from files_manager.storage.cache import build_expiring_store

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings

    # store handles live on app.state, one set per process
    database = Database(settings.database_url)
    await database.create_all()
    cache = build_expiring_store(settings)
    user_directory = UserDirectory(database)

    app.state.database = database
    app.state.cache = cache
    app.state.users = user_directory
    app.state.credentials = CredentialVerifier(user_directory)
    app.state.sessions = SessionManager(cache, settings.session_ttl_seconds)
    app.state.files = FileHierarchyStore(
        database, build_blob_store(settings), settings.page_size
    )
    logger.info("Files manager started (cache=%s, blobs=%s)", settings.cache_backend, settings.blob_backend)

    try:
        yield
    finally:
        await cache.close()
        await database.dispose()


async def handle_domain_error(request: Request, exc: FilesManagerError) -> JSONResponse:
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


async def handle_bad_request(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse({"error": "Invalid request"}, status_code=400)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    app = FastAPI(title="files-manager", lifespan=lifespan)
    app.state.settings = settings

    app.add_exception_handler(FilesManagerError, handle_domain_error)
    app.add_exception_handler(RequestValidationError, handle_bad_request)

    # include our routers
    app.include_router(app_routes.router)
    app.include_router(users.router)
    app.include_router(auth.router)
    app.include_router(files.router)
    return app


def run() -> None:
    settings = get_settings()
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.port)
