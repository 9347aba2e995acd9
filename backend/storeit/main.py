# storeit/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import config
from .db import init_db
from .errors import StoreItError
from .services import Revalidator
from .utils.response import error_from

# routers
from .auth.router import router as auth_router
from .users.router import router as users_router
from .files.router import router as files_router
from .storage.router import router as storage_router

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("Database initialized and app started.")
    yield
    logger.info("App shutdown complete.")


app = FastAPI(title="StoreIt Backend", lifespan=lifespan)
app.state.revalidator = Revalidator()

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StoreItError)
async def storeit_error_handler(request: Request, exc: StoreItError):
    return JSONResponse(status_code=exc.status_code, content=error_from(exc))


app.include_router(auth_router, prefix="/auth", tags=["auth"])
app.include_router(users_router, prefix="/users", tags=["users"])
app.include_router(files_router, prefix="/files", tags=["files"])
app.include_router(storage_router, prefix="/storage", tags=["storage"])
