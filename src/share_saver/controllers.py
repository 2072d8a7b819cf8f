from typing import Annotated, List, Tuple, Union

from litestar import Controller, Request, post
from litestar.exceptions import HTTPException
from litestar.params import Dependency
from litestar.response import Response
from litestar.status_codes import (
    HTTP_200_OK,
    HTTP_202_ACCEPTED,
    HTTP_400_BAD_REQUEST,
    HTTP_413_REQUEST_ENTITY_TOO_LARGE,
    HTTP_415_UNSUPPORTED_MEDIA_TYPE,
    HTTP_422_UNPROCESSABLE_ENTITY,
)

from .adapters.downloads import HttpxDownloadQueue
from .adapters.streams import UploadStreamProvider
from .core.config import Settings, get_logger
from .core.exceptions import LocationError
from .core.models import Outcome, PayloadRef, ShareAction, ShareRequest
from .core.paths import select_root
from .core.prober import ContentProber
from .dispatcher import ShareDispatcher
from .models import ErrorResponse, ShareResponse

logger = get_logger("controllers")

TRUTHY = {"1", "true", "yes", "on"}


def status_for(response: ShareResponse) -> int:
    if not response.supported:
        return HTTP_415_UNSUPPORTED_MEDIA_TYPE
    if response.outcome == Outcome.PENDING.value:
        return HTTP_202_ACCEPTED
    if response.outcome == Outcome.FAILURE.value:
        return HTTP_422_UNPROCESSABLE_ENTITY
    return HTTP_200_OK


class ShareController(Controller):
    path = "/share"

    @post("")
    async def share(
        self,
        request: Request,
        settings: Annotated[Settings, Dependency(skip_validation=True)],
        download_queue: Annotated[HttpxDownloadQueue, Dependency(skip_validation=True)],
        prober: Annotated[ContentProber, Dependency(skip_validation=True)],
    ) -> Response[Union[ShareResponse, ErrorResponse]]:
        """Receive a shared payload and save it under the selected location."""
        form = await request.form()

        dry_run = str(form.get("dry_run", "")).strip().lower() in TRUTHY
        provider = UploadStreamProvider()
        share_request = ShareRequest(
            action=ShareAction.parse(form.get("action") or ShareAction.SEND.value),
            mime_type=form.get("type") or None,
            payloads=await self._read_uploads(form, provider, settings),
            text=form.get("text"),
            subject=form.get("subject"),
        )

        root = None
        if not dry_run:
            try:
                root = select_root(
                    settings.storage_root,
                    settings.locations,
                    form.get("location") or None,
                )
            except LocationError as e:
                error_response = ErrorResponse.create_error(
                    code="LOCATION_REQUIRED",
                    message=e.message,
                    details=e.details,
                    suggestions=["Pass one of the configured locations as 'location'"],
                )
                raise HTTPException(
                    status_code=HTTP_400_BAD_REQUEST,
                    detail=e.message,
                    extra=error_response.model_dump(),
                )

        dispatcher = ShareDispatcher(
            provider,
            downloader=download_queue,
            prober=prober,
            chunk_size=settings.chunk_size,
        )
        result = await dispatcher.dispatch(share_request, root=root, dry_run=dry_run)

        response = ShareResponse.from_result(result, dry_run=dry_run)
        return Response(response, status_code=status_for(response))

    async def _read_uploads(
        self, form, provider: UploadStreamProvider, settings: Settings
    ) -> Tuple[PayloadRef, ...]:
        refs: List[PayloadRef] = []
        for upload in form.getall("files", []):
            if isinstance(upload, str):
                continue

            content = await upload.read()
            if len(content) > settings.max_upload_size:
                error_response = ErrorResponse.create_error(
                    code="FILE_TOO_LARGE",
                    message=f"Upload {upload.filename} exceeds {settings.max_upload_size} bytes",
                    details={"filename": upload.filename, "limit": settings.max_upload_size},
                )
                raise HTTPException(
                    status_code=HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                    detail=error_response.error.message,
                    extra=error_response.model_dump(),
                )

            handle = provider.add(content, upload.filename)
            refs.append(PayloadRef(handle=handle, display_name=upload.filename))

        logger.debug("Received %d uploads", len(refs))
        return tuple(refs)
