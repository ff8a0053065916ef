"""Authoritative in-process Python API for Paste Authority Service."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Callable

from packages.pastebin_shared.cancellation import CancellationToken
from packages.pastebin_shared.config import PastebinSettings
from packages.pastebin_shared.result import Result
from services.state.paste_authority.domain import (
    HealthStatus,
    PasteView,
    StoredPaste,
    TtlOption,
)
from services.state.paste_authority.interfaces import PasteStore
from services.state.paste_authority.sweeper import RetentionSweeper


class PasteAuthorityService(ABC):
    """Public API for checksum-addressed paste operations."""

    @abstractmethod
    def store_paste(
        self,
        *,
        content: str,
        ttl: timedelta | str | None = None,
        token: CancellationToken | None = None,
    ) -> Result[StoredPaste]:
        """Persist one paste and return its identity and lifecycle."""

    @abstractmethod
    def fetch_paste(
        self, *, checksum: str, token: CancellationToken | None = None
    ) -> Result[PasteView]:
        """Read and verify one paste; expired pastes report an expired error."""

    @abstractmethod
    def remove_paste(
        self, *, checksum: str, token: CancellationToken | None = None
    ) -> Result[bool]:
        """Delete one existing paste; missing pastes report not found."""

    @abstractmethod
    def paste_exists(
        self, *, checksum: str, token: CancellationToken | None = None
    ) -> Result[bool]:
        """Return whether a paste content object exists."""

    @abstractmethod
    def ttl_options(self) -> list[TtlOption]:
        """Return selectable TTL choices with the configured default marked."""

    @abstractmethod
    def health(
        self, *, token: CancellationToken | None = None
    ) -> Result[HealthStatus]:
        """Return service and owned bucket readiness status."""

    @abstractmethod
    def create_sweeper(
        self, *, clock: Callable[[], datetime] | None = None
    ) -> RetentionSweeper:
        """Return a retention sweeper bound to this service's store."""


def build_paste_authority_service(
    *,
    settings: PastebinSettings,
    store: PasteStore | None = None,
    token: CancellationToken | None = None,
) -> PasteAuthorityService:
    """Build default Paste Authority implementation from typed settings.

    Without an explicit ``store`` the S3 bucket is probed and created when
    missing; failures propagate as ``PasteStoreDependencyError``. Provisioning
    runs under a child of ``token`` bounded by the request timeout, so
    cancelling ``token`` aborts startup.
    """
    from resources.substrates.s3 import resolve_s3_substrate_settings
    from services.state.paste_authority.config import (
        resolve_paste_authority_settings,
    )
    from services.state.paste_authority.data import S3PasteStore
    from services.state.paste_authority.implementation import (
        DefaultPasteAuthorityService,
    )

    service_settings = resolve_paste_authority_settings(settings)
    if store is None:
        root = token or CancellationToken()
        scoped = root.child(timeout_seconds=service_settings.request_timeout_seconds)
        try:
            store = S3PasteStore.initialize(
                resolve_s3_substrate_settings(settings), token=scoped
            )
        finally:
            root.release(scoped)
    return DefaultPasteAuthorityService(settings=service_settings, store=store)
