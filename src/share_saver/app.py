import time
from typing import Annotated

from litestar import Litestar, get
from litestar.datastructures import State
from litestar.di import Provide
from litestar.params import Dependency
from litestar.response import Response
from litestar.status_codes import HTTP_200_OK

from . import __version__
from .adapters.downloads import HttpxDownloadQueue
from .controllers import ShareController
from .core.config import LoggingConfig, Settings, get_logger, get_settings
from .core.prober import ContentProber
from .models import HealthResponse, LocationsResponse

logger = get_logger("app")

# Track server start time for uptime calculation
_server_start_time = time.time()


@get("/health")
async def health() -> Response[HealthResponse]:
    """Health check endpoint"""
    uptime = int(time.time() - _server_start_time)
    health_data = HealthResponse(
        status="healthy",
        version=__version__,
        uptime_seconds=uptime,
    )
    return Response(health_data, status_code=HTTP_200_OK)


@get("/locations")
async def locations(
    settings: Annotated[Settings, Dependency(skip_validation=True)],
) -> Response[LocationsResponse]:
    """Return the save locations a share can be placed in"""
    data = LocationsResponse(
        storage_root=settings.storage_root, locations=settings.locations
    )
    return Response(data, status_code=HTTP_200_OK)


def provide_download_queue(state: State) -> HttpxDownloadQueue:
    return state.download_queue


def provide_prober(state: State) -> ContentProber:
    return state.prober


def startup(app: Litestar) -> None:
    """Configure logging and create the shared download queue and prober"""
    settings = app.state.config
    LoggingConfig(debug=settings.debug, log_level=settings.log_level).setup_logging()

    app.state.download_queue = HttpxDownloadQueue(
        chunk_size=settings.chunk_size,
        proxy=settings.http_proxy,
    )
    app.state.prober = ContentProber(
        timeout=settings.probe_timeout, proxy=settings.http_proxy
    )
    logger.info(
        "share-saver %s ready (storage_root=%s, locations=%s)",
        __version__,
        settings.storage_root,
        settings.locations,
    )


def shutdown(app: Litestar) -> None:
    """Let enqueued downloads finish before exiting"""
    queue = getattr(app.state, "download_queue", None)
    if queue is not None:
        queue.shutdown(wait=True)


def create_app(settings: Settings = None) -> Litestar:
    settings = settings or get_settings()

    def provide_settings() -> Settings:
        return settings

    return Litestar(
        route_handlers=[health, locations, ShareController],
        dependencies={
            "settings": Provide(provide_settings, sync_to_thread=False),
            "download_queue": Provide(provide_download_queue, sync_to_thread=False),
            "prober": Provide(provide_prober, sync_to_thread=False),
        },
        debug=settings.debug,
        state=State({"config": settings}),
        on_startup=[startup],
        on_shutdown=[shutdown],
    )


app = create_app()
