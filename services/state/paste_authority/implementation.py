"""Concrete Paste Authority Service implementation."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any, Callable

from pydantic import BaseModel, ValidationError

from packages.pastebin_shared.cancellation import (
    CancellationToken,
    OperationCancelledError,
)
from packages.pastebin_shared.durations import format_duration
from packages.pastebin_shared.errors import (
    ErrorDetail,
    codes,
    dependency_error,
    exception_to_error,
    expired_error,
    integrity_error,
    not_found_error,
    validation_error,
)
from packages.pastebin_shared.logging import fields, get_logger, public_api_instrumented
from packages.pastebin_shared.result import Result, failure, success
from services.state.paste_authority.component import SERVICE_COMPONENT_ID
from services.state.paste_authority.config import PasteAuthoritySettings
from services.state.paste_authority.domain import (
    HealthStatus,
    Paste,
    PasteMeta,
    PasteView,
    StoredPaste,
    TtlOption,
    ttl_options,
)
from services.state.paste_authority.interfaces import (
    ChecksumMismatchError,
    PasteNotFoundError,
    PasteStore,
    PasteStoreDependencyError,
)
from services.state.paste_authority.service import PasteAuthorityService
from services.state.paste_authority.sweeper import RetentionSweeper
from services.state.paste_authority.validation import (
    ChecksumRequest,
    StorePasteRequest,
    resolve_ttl,
)

_LOGGER = get_logger(__name__)


def _utc_now() -> datetime:
    return datetime.now(UTC)


class DefaultPasteAuthorityService(PasteAuthorityService):
    """Default paste service over one checksum-addressed paste store."""

    def __init__(
        self,
        *,
        settings: PasteAuthoritySettings,
        store: PasteStore,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._settings = settings
        self._store = store
        self._clock = clock

    @property
    def settings(self) -> PasteAuthoritySettings:
        """Return resolved service settings."""
        return self._settings

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=str(SERVICE_COMPONENT_ID),
    )
    def health(
        self, *, token: CancellationToken | None = None
    ) -> Result[HealthStatus]:
        """Return readiness based on one bucket probe."""
        token = self._request_token(token)
        try:
            status = self._store.health(token=token)
        except OperationCancelledError as exc:
            return failure([exception_to_error(exc)])
        return success(
            HealthStatus(
                service_ready=True,
                substrate_ready=status.ready,
                detail=status.detail,
            )
        )

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=str(SERVICE_COMPONENT_ID),
    )
    def store_paste(
        self,
        *,
        content: str,
        ttl: timedelta | str | None = None,
        token: CancellationToken | None = None,
    ) -> Result[StoredPaste]:
        """Validate, address and persist one paste."""
        request, errors = self._validate_request(
            model=StorePasteRequest, payload={"content": content}
        )
        if errors:
            return failure(errors)
        assert isinstance(request, StorePasteRequest)

        paste = Paste.from_content(request.content)
        raw = paste.encoded()
        limit = self._settings.max_paste_size_bytes
        if len(raw) > limit:
            return failure(
                [
                    validation_error(
                        f"paste too large (max {limit} bytes)",
                        code=codes.INVALID_ARGUMENT,
                        metadata={"field": "content", "size": str(len(raw))},
                    )
                ]
            )

        resolved_ttl = resolve_ttl(ttl, self._settings.default_ttl)
        meta = PasteMeta.new(
            checksum=paste.checksum,
            size=len(raw),
            ttl=resolved_ttl,
            now=self._clock(),
        )
        try:
            self._store.store(paste, meta, token=self._request_token(token))
        except Exception as exc:  # noqa: BLE001
            return self._store_failure(
                operation="store_paste", checksum=paste.checksum, exc=exc
            )

        _LOGGER.info(
            "stored paste",
            extra={
                fields.CHECKSUM: paste.checksum,
                fields.SIZE: meta.size,
                fields.TTL: format_duration(resolved_ttl),
            },
        )
        return success(
            StoredPaste(
                checksum=paste.checksum,
                created_at=meta.created_at,
                expires_at=meta.expires_at,
                size=meta.size,
                ttl=resolved_ttl,
            )
        )

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=str(SERVICE_COMPONENT_ID),
        id_fields=("checksum",),
    )
    def fetch_paste(
        self, *, checksum: str, token: CancellationToken | None = None
    ) -> Result[PasteView]:
        """Read one paste, verifying integrity and expiry."""
        request, errors = self._validate_request(
            model=ChecksumRequest, payload={"checksum": checksum}
        )
        if errors:
            return failure(errors)
        assert isinstance(request, ChecksumRequest)

        try:
            paste, meta = self._store.get(
                request.checksum, token=self._request_token(token)
            )
        except Exception as exc:  # noqa: BLE001
            return self._store_failure(
                operation="fetch_paste", checksum=request.checksum, exc=exc
            )

        if meta.is_expired(self._clock()):
            return failure(
                [
                    expired_error(
                        "paste has expired",
                        metadata={
                            fields.CHECKSUM: request.checksum,
                            "expires_at": meta.expires_at.isoformat(),
                        },
                    )
                ]
            )

        return success(
            PasteView(
                checksum=paste.checksum,
                content=paste.content,
                created_at=meta.created_at,
                expires_at=meta.expires_at,
                size=meta.size,
            )
        )

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=str(SERVICE_COMPONENT_ID),
        id_fields=("checksum",),
    )
    def remove_paste(
        self, *, checksum: str, token: CancellationToken | None = None
    ) -> Result[bool]:
        """Delete one paste after confirming it exists."""
        request, errors = self._validate_request(
            model=ChecksumRequest, payload={"checksum": checksum}
        )
        if errors:
            return failure(errors)
        assert isinstance(request, ChecksumRequest)

        token = self._request_token(token)
        try:
            if not self._store.exists(request.checksum, token=token):
                return self._not_found(checksum=request.checksum)
            self._store.delete(request.checksum, token=token)
        except Exception as exc:  # noqa: BLE001
            return self._store_failure(
                operation="remove_paste", checksum=request.checksum, exc=exc
            )

        _LOGGER.info("deleted paste", extra={fields.CHECKSUM: request.checksum})
        return success(True)

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=str(SERVICE_COMPONENT_ID),
        id_fields=("checksum",),
    )
    def paste_exists(
        self, *, checksum: str, token: CancellationToken | None = None
    ) -> Result[bool]:
        """Probe for one paste content object."""
        request, errors = self._validate_request(
            model=ChecksumRequest, payload={"checksum": checksum}
        )
        if errors:
            return failure(errors)
        assert isinstance(request, ChecksumRequest)

        try:
            found = self._store.exists(
                request.checksum, token=self._request_token(token)
            )
        except Exception as exc:  # noqa: BLE001
            return self._store_failure(
                operation="paste_exists", checksum=request.checksum, exc=exc
            )
        return success(found)

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=str(SERVICE_COMPONENT_ID),
    )
    def ttl_options(self) -> list[TtlOption]:
        """Return the TTL catalog with the configured default marked."""
        return ttl_options(self._settings.default_ttl)

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=str(SERVICE_COMPONENT_ID),
    )
    def create_sweeper(
        self, *, clock: Callable[[], datetime] | None = None
    ) -> RetentionSweeper:
        """Return a retention sweeper over this service's store."""
        return RetentionSweeper(
            store=self._store,
            interval=self._settings.cleanup_interval,
            clock=clock or self._clock,
        )

    def _request_token(self, token: CancellationToken | None) -> CancellationToken:
        """Return the caller token or a fresh one bounded by the request timeout."""
        if token is not None:
            return token
        return CancellationToken(
            timeout_seconds=self._settings.request_timeout_seconds
        )

    def _validate_request(
        self,
        *,
        model: type[BaseModel],
        payload: dict[str, Any],
    ) -> tuple[BaseModel | None, list[ErrorDetail]]:
        """Validate one request payload model."""
        try:
            request = model.model_validate(payload)
        except ValidationError as exc:
            return None, [
                validation_error(
                    f"request validation failed: {err['msg']}",
                    code=codes.INVALID_ARGUMENT,
                    metadata={"field": ".".join(str(p) for p in err["loc"])},
                )
                for err in exc.errors()
            ]
        return request, []

    def _not_found(self, *, checksum: str) -> Result[Any]:
        """Return canonical not-found result for checksum lookups."""
        return failure(
            [
                not_found_error(
                    "paste not found",
                    code=codes.RESOURCE_NOT_FOUND,
                    metadata={fields.CHECKSUM: checksum},
                )
            ]
        )

    def _store_failure(
        self,
        *,
        operation: str,
        checksum: str,
        exc: Exception,
    ) -> Result[Any]:
        """Map one store exception into structured result errors."""
        if isinstance(exc, PasteNotFoundError):
            return self._not_found(checksum=checksum)

        if isinstance(exc, ChecksumMismatchError):
            _LOGGER.error(
                "%s found corrupted paste content",
                operation,
                extra={fields.CHECKSUM: checksum, "actual_checksum": exc.actual},
            )
            return failure(
                [
                    integrity_error(
                        "content checksum mismatch, possible data corruption",
                        code=codes.CHECKSUM_MISMATCH,
                        metadata={
                            fields.CHECKSUM: checksum,
                            "actual_checksum": exc.actual,
                        },
                    )
                ]
            )

        if isinstance(exc, OperationCancelledError):
            _LOGGER.info(
                "%s cancelled: %s",
                operation,
                str(exc),
                extra={fields.CHECKSUM: checksum},
            )
            return failure([exception_to_error(exc)])

        if isinstance(exc, PasteStoreDependencyError):
            _LOGGER.warning(
                "%s failed due to dependency error: %s",
                operation,
                str(exc),
                extra={fields.CHECKSUM: checksum},
            )
            return failure(
                [
                    dependency_error(
                        f"{operation} failed",
                        code=codes.DEPENDENCY_FAILURE,
                        metadata={
                            fields.CHECKSUM: checksum,
                            "exception_type": type(exc).__name__,
                        },
                    )
                ]
            )

        _LOGGER.error(
            "%s failed unexpectedly: exception_type=%s",
            operation,
            type(exc).__name__,
            exc_info=exc,
        )
        return failure([exception_to_error(exc)])
