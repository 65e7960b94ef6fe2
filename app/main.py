from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI
from fastapi.responses import RedirectResponse

from app.auth.router import router as auth_router
from app.core.constants import Routes
from app.core.cors import add_cors_middleware
from app.core.email import init_resend
from app.core.exception_handlers import register_exception_handlers
from app.core.http import close_google_client
from app.core.logging import configure_logging
from app.core.rate_limit import add_rate_limit_middleware
from app.core.request_logging import add_request_logging_middleware
from app.db.engine import init_db
from app.health.router import router as health_router
from app.models.error import ErrorResponse
from app.note.router import router as note_router

configure_logging()


@asynccontextmanager
async def lifespan(_: FastAPI):
    init_db()
    init_resend()
    yield
    await close_google_client()


app = FastAPI(
    title="HD Notes",
    version="1.0.0",
    lifespan=lifespan,
    responses={"default": {"model": ErrorResponse}},
)

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(auth_router)
api_router.include_router(note_router)

app.include_router(api_router)


@app.get("/", include_in_schema=False)
async def root():
    return RedirectResponse(url=Routes.HEALTH.prefix)


# Last added runs first: CORS -> request logging -> request ceiling.
add_rate_limit_middleware(app)
add_request_logging_middleware(app)
add_cors_middleware(app)
register_exception_handlers(app)
