from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from polly_gateway import __version__
from polly_gateway.auth.exceptions import AuthProviderUnavailableError
from polly_gateway.auth.provider_factory import get_auth_provider, reset_auth_provider
from polly_gateway.auth.router import router as auth_router
from polly_gateway.config import get_client_base_url
from polly_gateway.polls.router import router as polls_router
from polly_gateway.utils.logger import logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # Close the provider only if a request ever built it
    if hasattr(get_auth_provider, "_instance"):
        await get_auth_provider().close()
        reset_auth_provider()


app = FastAPI(
    title="Polly Gateway",
    description="Identity, session and ownership API for the Polly app",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[get_client_base_url()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router, prefix="/api")
app.include_router(polls_router, prefix="/api")


@app.exception_handler(AuthProviderUnavailableError)
async def auth_provider_unavailable_handler(
    request: Request, exc: AuthProviderUnavailableError
) -> JSONResponse:
    logger.error(
        "Auth provider unavailable", path=request.url.path, error=exc.message
    )
    return JSONResponse(
        status_code=503, content={"error": "Authentication service unavailable"}
    )


@app.get("/")
async def root():
    """Root endpoint."""
    return {"status": "ok", "message": "Polly Gateway is running"}


@app.get("/healthcheck")
async def healthcheck():
    """Health check endpoint."""
    return {"status": "ok", "message": "Polly Gateway is running"}
