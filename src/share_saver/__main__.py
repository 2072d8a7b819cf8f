import argparse
import asyncio
import socket
import sys

import uvicorn

from .adapters.downloads import HttpxDownloadQueue
from .adapters.streams import LocalStreamProvider
from .core.config import LoggingConfig, get_settings
from .core.exceptions import LocationError
from .core.models import Outcome, PayloadRef, ShareAction, ShareRequest
from .core.paths import select_root
from .core.prober import ContentProber
from .dispatcher import ShareDispatcher


def is_port_available(host: str, port: int) -> bool:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        try:
            sock.bind((host, port))
            return True
        except OSError:
            return False


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="share-saver",
        description="Save shared files, text and links into a chosen location",
    )
    subparsers = parser.add_subparsers(dest="command")

    serve = subparsers.add_parser("serve", help="Run the HTTP share receiver")
    serve.add_argument("--host", default=None, help="Host to bind to")
    serve.add_argument("--port", type=int, default=None, help="Port to bind to")

    save = subparsers.add_parser("save", help="Save a share built from local files")
    save.add_argument("files", nargs="*", help="Files to share")
    save.add_argument("--type", dest="mime_type", required=True, help="Declared MIME type")
    save.add_argument(
        "--action",
        default=None,
        help="Share action (SEND or SEND_MULTIPLE, inferred from the file count)",
    )
    save.add_argument("--text", default=None, help="Shared text or link")
    save.add_argument("--subject", default=None, help="Subject, used as the filename")
    save.add_argument(
        "--location", default=None, help="Name of a configured save location"
    )
    save.add_argument(
        "--root", default=None, help="Directory to save into, bypassing configured locations"
    )
    save.add_argument(
        "--dry-run", action="store_true", help="Only check the share is supported"
    )
    return parser


def serve(args: argparse.Namespace) -> int:
    settings = get_settings()
    host = args.host or settings.host
    port = args.port or settings.port

    if not is_port_available(host, port):
        print(f"Error: Port {port} is already in use on {host}", file=sys.stderr)
        return 1

    from .app import app

    uvicorn.run(app, host=host, port=port, log_level=settings.log_level.lower())
    return 0


def save(args: argparse.Namespace) -> int:
    settings = get_settings()
    LoggingConfig(debug=settings.debug, log_level=settings.log_level).setup_logging()

    action = args.action or (
        ShareAction.SEND_MULTIPLE.value if len(args.files) > 1 else ShareAction.SEND.value
    )
    request = ShareRequest(
        action=ShareAction.parse(action),
        mime_type=args.mime_type,
        payloads=tuple(PayloadRef(handle=path) for path in args.files),
        text=args.text,
        subject=args.subject,
    )

    root = args.root
    if root is None and not args.dry_run:
        try:
            root = select_root(settings.storage_root, settings.locations, args.location)
        except LocationError as e:
            print(f"Error: {e.message}", file=sys.stderr)
            return 1

    queue = HttpxDownloadQueue(chunk_size=settings.chunk_size, proxy=settings.http_proxy)
    dispatcher = ShareDispatcher(
        LocalStreamProvider(),
        downloader=queue,
        prober=ContentProber(timeout=settings.probe_timeout, proxy=settings.http_proxy),
        chunk_size=settings.chunk_size,
    )
    try:
        result = asyncio.run(dispatcher.dispatch(request, root=root, dry_run=args.dry_run))
    finally:
        # The queue outlives the event loop; let pending downloads finish.
        queue.shutdown(wait=True)

    print(f"{result.outcome.value}: {', '.join(result.filenames) or '-'}")
    if result.outcome is Outcome.FAILURE:
        for key, value in result.diagnostics.items():
            print(f"  {key}: {value}", file=sys.stderr)
        return 1
    return 0


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "save":
        return save(args)
    if args.command == "serve":
        return serve(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
