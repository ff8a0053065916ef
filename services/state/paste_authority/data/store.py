"""Paste persistence over an S3-compatible object substrate.

Bucket layout::

    pastes/{checksum}        raw content, text/plain
    meta/{checksum}.json     JSON metadata, application/json

The two objects are written and deleted in sequence with no rollback: a
failed metadata write leaves the content object behind, and a failed delete
may leave either object behind.
"""

from __future__ import annotations

from pydantic import ValidationError

from packages.pastebin_shared.cancellation import CancellationToken
from packages.pastebin_shared.logging import get_logger
from resources.substrates.s3 import (
    Boto3S3Substrate,
    ObjectSubstrate,
    S3ObjectNotFoundError,
    S3SubstrateDependencyError,
    S3SubstrateError,
    S3SubstrateSettings,
)
from services.state.paste_authority.checksum import compute_checksum
from services.state.paste_authority.domain import Paste, PasteMeta
from services.state.paste_authority.interfaces import (
    ChecksumMismatchError,
    MetaVisitor,
    PasteNotFoundError,
    PasteStore,
    PasteStoreDependencyError,
    Stop,
    StoreHealth,
)

_LOGGER = get_logger(__name__)

CONTENT_PREFIX = "pastes/"
META_PREFIX = "meta/"
CONTENT_TYPE_TEXT = "text/plain; charset=utf-8"
CONTENT_TYPE_JSON = "application/json"


def content_key(checksum: str) -> str:
    """Return the object key holding paste content."""
    return f"{CONTENT_PREFIX}{checksum}"


def meta_key(checksum: str) -> str:
    """Return the object key holding paste metadata."""
    return f"{META_PREFIX}{checksum}.json"


class S3PasteStore(PasteStore):
    """Checksum-addressed paste store backed by one bucket."""

    def __init__(self, *, substrate: ObjectSubstrate) -> None:
        self._substrate = substrate

    @classmethod
    def initialize(
        cls,
        settings: S3SubstrateSettings,
        *,
        token: CancellationToken | None = None,
    ) -> "S3PasteStore":
        """Connect to the bucket, creating it on first run."""
        substrate = Boto3S3Substrate(settings=settings)
        try:
            created = substrate.ensure_bucket(token=token)
        except S3SubstrateDependencyError as exc:
            raise PasteStoreDependencyError(
                f"failed to ensure bucket exists: {exc}"
            ) from exc
        if created:
            _LOGGER.info("provisioned paste bucket", extra={"bucket": settings.bucket})
        return cls(substrate=substrate)

    @property
    def substrate(self) -> ObjectSubstrate:
        """Return the underlying object substrate."""
        return self._substrate

    def store(
        self,
        paste: Paste,
        meta: PasteMeta,
        *,
        token: CancellationToken | None = None,
    ) -> None:
        """Write content, then metadata; content failure skips the metadata."""
        try:
            self._substrate.put_object(
                key=content_key(paste.checksum),
                body=paste.encoded(),
                content_type=CONTENT_TYPE_TEXT,
                token=token,
            )
        except S3SubstrateError as exc:
            raise PasteStoreDependencyError(f"failed to store paste: {exc}") from exc

        try:
            self._substrate.put_object(
                key=meta_key(paste.checksum),
                body=meta.to_json(),
                content_type=CONTENT_TYPE_JSON,
                token=token,
            )
        except S3SubstrateError as exc:
            raise PasteStoreDependencyError(
                f"failed to store metadata: {exc}"
            ) from exc

    def get(
        self, checksum: str, *, token: CancellationToken | None = None
    ) -> tuple[Paste, PasteMeta]:
        """Read content, verify its checksum, then read metadata."""
        try:
            raw = self._substrate.get_object(key=content_key(checksum), token=token)
        except S3ObjectNotFoundError:
            raise PasteNotFoundError(checksum) from None
        except S3SubstrateError as exc:
            raise PasteStoreDependencyError(f"failed to get paste: {exc}") from exc

        actual = compute_checksum(raw)
        if actual != checksum:
            raise ChecksumMismatchError(expected=checksum, actual=actual)

        try:
            raw_meta = self._substrate.get_object(key=meta_key(checksum), token=token)
        except S3ObjectNotFoundError:
            raise PasteNotFoundError(checksum, "metadata not found") from None
        except S3SubstrateError as exc:
            raise PasteStoreDependencyError(
                f"failed to get metadata: {exc}"
            ) from exc

        try:
            meta = PasteMeta.from_json(raw_meta)
        except ValidationError:
            raise PasteNotFoundError(checksum, "failed to decode metadata") from None

        paste = Paste(checksum=checksum, content=raw.decode("utf-8", errors="replace"))
        return paste, meta

    def delete(self, checksum: str, *, token: CancellationToken | None = None) -> None:
        """Delete content, then metadata; any failure may leave objects behind."""
        try:
            self._substrate.delete_object(key=content_key(checksum), token=token)
        except S3SubstrateError as exc:
            raise PasteStoreDependencyError(
                f"failed to delete paste, some objects may remain: {exc}"
            ) from exc

        try:
            self._substrate.delete_object(key=meta_key(checksum), token=token)
        except S3SubstrateError as exc:
            raise PasteStoreDependencyError(
                f"failed to delete metadata, some objects may remain: {exc}"
            ) from exc

    def health(self, *, token: CancellationToken | None = None) -> StoreHealth:
        """Report bucket readiness from the substrate probe."""
        status = self._substrate.health(token=token)
        return StoreHealth(ready=status.ready, detail=status.detail)

    def exists(self, checksum: str, *, token: CancellationToken | None = None) -> bool:
        """Return whether the content object exists."""
        try:
            return self._substrate.head_object(key=content_key(checksum), token=token)
        except S3SubstrateError as exc:
            raise PasteStoreDependencyError(
                f"failed to check paste: {exc}"
            ) from exc

    def for_each_meta(
        self,
        visit: MetaVisitor,
        *,
        token: CancellationToken | None = None,
    ) -> None:
        """Stream metadata objects to ``visit`` until exhausted or stopped.

        Unreadable entries are skipped. A ``Stop`` outcome halts iteration and
        its error is raised. Listing failures raise ``PasteStoreDependencyError``.
        """
        keys = self._substrate.iter_keys(prefix=META_PREFIX, token=token)
        while True:
            try:
                key = next(keys)
            except StopIteration:
                return
            except S3SubstrateError as exc:
                raise PasteStoreDependencyError(
                    f"failed to list metadata: {exc}"
                ) from exc

            meta = self._fetch_meta(key, token=token)
            if meta is None:
                continue
            outcome = visit(meta)
            if isinstance(outcome, Stop):
                raise outcome.error

    def _fetch_meta(
        self, key: str, *, token: CancellationToken | None
    ) -> PasteMeta | None:
        """Read and decode one metadata object, or ``None`` when unreadable."""
        try:
            raw = self._substrate.get_object(key=key, token=token)
        except S3SubstrateError as exc:
            _LOGGER.debug(
                "skipping unreadable metadata",
                extra={"key": key, "error": str(exc)},
            )
            return None
        try:
            return PasteMeta.from_json(raw)
        except ValidationError:
            _LOGGER.debug("skipping undecodable metadata", extra={"key": key})
            return None
