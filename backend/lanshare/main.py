import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from lanshare.api import browse, download, qr, upload
from lanshare.core.config import Settings, settings
from lanshare.core.limits import BodySizeLimitMiddleware
from lanshare.services.share import FileShare

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    share: FileShare = app.state.share
    # Configure logging based on debug setting
    logging.basicConfig(
        level=logging.DEBUG if share.settings.debug else logging.INFO,
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s" if share.settings.debug
        else "%(levelname)-8s %(name)s: %(message)s",
    )
    logger.info(f"{app.title} sharing {share.root}")
    yield


async def unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse({"detail": "Internal server error"}, status_code=500)


def create_app(app_settings: Settings = settings, share: FileShare | None = None) -> FastAPI:
    # No docs routes: every other path belongs to the shared tree.
    app = FastAPI(
        title=app_settings.app_name,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.share = share or FileShare(app_settings)

    app.add_middleware(BodySizeLimitMiddleware, max_bytes=app_settings.max_upload_bytes)
    app.add_exception_handler(Exception, unhandled_error)

    # Order matters: the browse router catches every remaining path.
    app.include_router(qr.router, tags=["qrcode"])
    app.include_router(download.router, tags=["download"])
    app.include_router(upload.router, tags=["upload"])
    app.include_router(browse.router, tags=["browse"])
    return app


app = create_app()


def main() -> None:
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
