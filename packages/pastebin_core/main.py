"""Process entrypoint for the pastebin server and retention sweeper."""

from __future__ import annotations

import argparse
import signal
import threading
from importlib.metadata import PackageNotFoundError, version
from typing import Sequence

from fastapi import APIRouter

from packages.pastebin_shared.cancellation import (
    CancellationToken,
    OperationCancelledError,
)
from packages.pastebin_shared.config import PastebinSettings, load_settings
from packages.pastebin_shared.durations import format_duration
from packages.pastebin_shared.http import build_server, create_app
from packages.pastebin_shared.logging import configure_logging, fields, get_logger
from resources.substrates.s3 import resolve_s3_substrate_settings
from services.state.paste_authority.api import register_routes
from services.state.paste_authority.config import resolve_paste_authority_settings
from services.state.paste_authority.service import build_paste_authority_service

_LOGGER = get_logger(__name__)
_DISTRIBUTION = "pastebin"
_SWEEPER_STOP_TIMEOUT_SECONDS = 5.0


def get_version() -> str:
    """Return the installed distribution version, or ``dev`` from a checkout."""
    try:
        return version(_DISTRIBUTION)
    except PackageNotFoundError:
        return "dev"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pastebin",
        description="Self-hosted paste sharing backed by S3-compatible storage.",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="print version information and exit",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="path to a YAML settings file (overrides PASTEBIN_CONFIG_FILE)",
    )
    return parser


def _log_configuration(settings: PastebinSettings) -> None:
    """Log the effective configuration without secrets."""
    service_settings = resolve_paste_authority_settings(settings)
    s3_settings = resolve_s3_substrate_settings(settings)
    _LOGGER.info(
        "configuration loaded",
        extra={
            "host": settings.http.host,
            "port": settings.http.port,
            "s3_endpoint": s3_settings.endpoint,
            "s3_region": s3_settings.region,
            "s3_bucket": s3_settings.bucket,
            "s3_use_ssl": s3_settings.use_ssl,
            "cleanup_interval": format_duration(service_settings.cleanup_interval),
            "max_paste_size": service_settings.max_paste_size_bytes,
            "default_ttl": format_duration(service_settings.default_ttl),
        },
    )


def run(*, config_path: str | None = None) -> None:
    """Build the service, start the sweeper and serve HTTP until signalled."""
    settings = load_settings(config_path=config_path)
    configure_logging(
        level=settings.logging.level,
        json_output=settings.logging.json_output,
        service=settings.logging.service,
        environment=settings.logging.environment,
    )
    _LOGGER.info("starting pastebin", extra={fields.VERSION: get_version()})
    _log_configuration(settings)

    shutdown = CancellationToken()

    def _handle_shutdown(signum: int, _frame: object) -> None:
        _LOGGER.info(
            "received shutdown signal",
            extra={"signal": signal.Signals(signum).name},
        )
        shutdown.cancel()

    signal.signal(signal.SIGINT, _handle_shutdown)
    signal.signal(signal.SIGTERM, _handle_shutdown)

    try:
        service = build_paste_authority_service(settings=settings, token=shutdown)
    except OperationCancelledError:
        if shutdown.cancelled:
            _LOGGER.info("startup cancelled")
            return
        raise

    app = create_app(title="Pastebin", version=get_version())
    router = APIRouter()
    register_routes(router=router, service=service, base_url=settings.http.base_url)
    app.include_router(router)
    server = build_server(
        app,
        host=settings.http.host,
        port=settings.http.port,
        log_level=settings.logging.level,
        timeout_graceful_shutdown=settings.http.shutdown_timeout_seconds,
    )

    sweeper = service.create_sweeper()
    sweeper.start(shutdown)

    http_thread = threading.Thread(target=server.run, name="http-server", daemon=True)
    http_thread.start()
    _LOGGER.info(
        "starting server",
        extra={"address": f"{settings.http.host}:{settings.http.port}"},
    )
    try:
        while not shutdown.wait(1.0):
            if not http_thread.is_alive():
                raise RuntimeError("http server exited unexpectedly")
    finally:
        shutdown.cancel()
        server.should_exit = True
        http_thread.join(timeout=settings.http.shutdown_timeout_seconds)
        if not sweeper.stop(timeout=_SWEEPER_STOP_TIMEOUT_SECONDS):
            _LOGGER.warning("retention sweeper did not stop in time")
        _LOGGER.info("server stopped")


def main(argv: Sequence[str] | None = None) -> int:
    """Parse arguments, run the process and return its exit status."""
    args = _build_parser().parse_args(argv)
    if args.version:
        print(f"pastebin {get_version()}")
        return 0

    try:
        run(config_path=args.config)
    except Exception as exc:  # noqa: BLE001
        _LOGGER.error("fatal error", extra={"error": str(exc)}, exc_info=exc)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
