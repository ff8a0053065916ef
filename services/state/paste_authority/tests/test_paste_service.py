"""Behavior tests for Paste Authority Service result semantics."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from packages.pastebin_shared.cancellation import (
    CancellationToken,
    OperationCancelledError,
)
from packages.pastebin_shared.config import PastebinSettings
from packages.pastebin_shared.errors import ErrorCategory, codes
from services.state.paste_authority.config import PasteAuthoritySettings
from services.state.paste_authority.data import S3PasteStore, content_key, meta_key
from services.state.paste_authority.implementation import (
    DefaultPasteAuthorityService,
)
from services.state.paste_authority.service import build_paste_authority_service
from services.state.paste_authority.sweeper import RetentionSweeper

_HELLO = "dffd6021bb2bd5b0af676290809ec3a53191dd81c7f70a4b28688a362182986f"


class _Clock:
    def __init__(self) -> None:
        self.now = datetime(2026, 1, 15, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock() -> _Clock:
    return _Clock()


@pytest.fixture
def service(store: S3PasteStore, clock: _Clock) -> DefaultPasteAuthorityService:
    return DefaultPasteAuthorityService(
        settings=PasteAuthoritySettings(
            default_ttl=timedelta(days=7),
            max_paste_size_bytes=64,
        ),
        store=store,
        clock=clock,
    )


def test_store_then_fetch_round_trips(service: DefaultPasteAuthorityService) -> None:
    """Stored content should be fetched back verbatim with its lifecycle."""
    stored = service.store_paste(content="Hello, World!", ttl="48h")

    assert stored.ok
    assert stored.payload is not None
    assert stored.payload.checksum == _HELLO
    assert stored.payload.ttl == timedelta(hours=48)
    assert stored.payload.size == 13

    fetched = service.fetch_paste(checksum=_HELLO)

    assert fetched.ok
    assert fetched.payload is not None
    assert fetched.payload.content == "Hello, World!"
    assert fetched.payload.expires_at - fetched.payload.created_at == timedelta(hours=48)


def test_store_uses_default_ttl_for_unusable_input(
    service: DefaultPasteAuthorityService,
) -> None:
    """Absent or invalid TTL input should fall back to the configured default."""
    for raw in (None, "", "-1h", "whenever"):
        result = service.store_paste(content=f"ttl {raw}", ttl=raw)
        assert result.payload is not None
        assert result.payload.ttl == timedelta(days=7)


def test_store_rejects_empty_content(
    service: DefaultPasteAuthorityService, substrate
) -> None:
    """Empty content should be a validation error with no I/O."""
    result = service.store_paste(content="")

    assert result.has_category(ErrorCategory.VALIDATION)
    assert "content is required" in result.errors[0].message
    assert substrate.calls == []


def test_store_rejects_oversized_content(
    service: DefaultPasteAuthorityService, substrate
) -> None:
    """Content above the byte limit should be rejected before writing."""
    result = service.store_paste(content="ø" * 33)

    assert result.has_category(ErrorCategory.VALIDATION)
    assert "max 64 bytes" in result.errors[0].message
    assert substrate.calls == []


def test_store_reports_dependency_failure(
    service: DefaultPasteAuthorityService, substrate
) -> None:
    """Backend write failures should map to dependency errors."""
    substrate.fail("put", meta_key(_HELLO))

    result = service.store_paste(content="Hello, World!")

    assert result.has_category(ErrorCategory.DEPENDENCY)
    assert result.errors[0].retryable is True


@pytest.mark.parametrize("checksum", ["", "abc", _HELLO + "0", "z" * 64])
def test_malformed_identifier_is_rejected_before_io(
    service: DefaultPasteAuthorityService, substrate, checksum: str
) -> None:
    """Identifier validation should happen before any backend call."""
    for result in (
        service.fetch_paste(checksum=checksum),
        service.remove_paste(checksum=checksum),
        service.paste_exists(checksum=checksum),
    ):
        assert result.has_category(ErrorCategory.VALIDATION)
    assert substrate.calls == []


def test_uppercase_identifier_is_normalized(
    service: DefaultPasteAuthorityService,
) -> None:
    """Uppercase hex identifiers address the same paste."""
    service.store_paste(content="Hello, World!")

    assert service.fetch_paste(checksum=_HELLO.upper()).ok


def test_fetch_missing_paste_is_not_found(
    service: DefaultPasteAuthorityService,
) -> None:
    """Unknown checksums should report not found."""
    result = service.fetch_paste(checksum="0" * 64)

    assert result.has_category(ErrorCategory.NOT_FOUND)
    assert result.errors[0].code == codes.RESOURCE_NOT_FOUND


def test_fetch_corrupted_paste_is_integrity_error(
    service: DefaultPasteAuthorityService, substrate
) -> None:
    """Out-of-band content replacement should surface as corruption."""
    service.store_paste(content="Hello, World!")
    substrate.objects[content_key(_HELLO)] = b"Goodbye"

    result = service.fetch_paste(checksum=_HELLO)

    assert result.has_category(ErrorCategory.INTEGRITY)
    assert result.errors[0].code == codes.CHECKSUM_MISMATCH


def test_fetch_expired_paste_is_expired_error(
    service: DefaultPasteAuthorityService, clock: _Clock
) -> None:
    """Fetching at or after expiry should report the expired category."""
    service.store_paste(content="Hello, World!", ttl="1h")
    clock.now += timedelta(hours=1)

    result = service.fetch_paste(checksum=_HELLO)

    assert result.has_category(ErrorCategory.EXPIRED)
    assert result.payload is None


def test_fetch_with_cancelled_token_is_cancelled_error(
    service: DefaultPasteAuthorityService,
) -> None:
    """A cancelled caller token should surface as a cancelled error."""
    service.store_paste(content="Hello, World!")
    token = CancellationToken()
    token.cancel()

    result = service.fetch_paste(checksum=_HELLO, token=token)

    assert result.has_category(ErrorCategory.CANCELLED)
    assert result.errors[0].code == codes.OPERATION_CANCELLED


def test_expired_deadline_reports_deadline_exceeded(
    service: DefaultPasteAuthorityService,
) -> None:
    """A token past its deadline should report deadline exceeded."""
    token = CancellationToken(timeout_seconds=0)

    result = service.paste_exists(checksum=_HELLO, token=token)

    assert result.has_category(ErrorCategory.CANCELLED)
    assert result.errors[0].code == codes.DEADLINE_EXCEEDED


def test_remove_twice_reports_not_found_second_time(
    service: DefaultPasteAuthorityService, substrate
) -> None:
    """The first removal succeeds and the second reports not found."""
    service.store_paste(content="Hello, World!")

    first = service.remove_paste(checksum=_HELLO)
    second = service.remove_paste(checksum=_HELLO)

    assert first.ok and first.payload is True
    assert second.has_category(ErrorCategory.NOT_FOUND)
    assert substrate.objects == {}


def test_paste_exists_follows_content_object(
    service: DefaultPasteAuthorityService,
) -> None:
    """Existence should flip once the paste is stored."""
    assert service.paste_exists(checksum=_HELLO).payload is False

    service.store_paste(content="Hello, World!")

    assert service.paste_exists(checksum=_HELLO).payload is True


def test_ttl_options_mark_configured_default(
    service: DefaultPasteAuthorityService,
) -> None:
    """The one-week default should be the marked option."""
    defaults = [option.label for option in service.ttl_options() if option.is_default]

    assert defaults == ["1 week"]


def test_health_reports_substrate_readiness(
    service: DefaultPasteAuthorityService, substrate
) -> None:
    """Health should succeed and mirror the bucket probe."""
    ready = service.health()
    substrate.ready = False
    degraded = service.health()

    assert ready.payload is not None and ready.payload.substrate_ready is True
    assert degraded.ok
    assert degraded.payload is not None
    assert degraded.payload.service_ready is True
    assert degraded.payload.substrate_ready is False


def test_create_sweeper_uses_configured_interval(
    service: DefaultPasteAuthorityService, clock: _Clock, substrate
) -> None:
    """The sweeper should share the service store and clock."""
    service.store_paste(content="Hello, World!", ttl="1h")
    clock.now += timedelta(hours=2)

    sweeper = service.create_sweeper()
    report = sweeper.sweep_once()

    assert isinstance(sweeper, RetentionSweeper)
    assert report.deleted == 1
    assert substrate.objects == {}


def test_build_service_from_root_settings(store: S3PasteStore) -> None:
    """The builder should resolve component settings from the root tree."""
    settings = PastebinSettings(
        components={
            "service": {"paste_authority": {"default_ttl": "24h"}},
            "substrate": {"s3": {"bucket": "pastes"}},
        }
    )

    service = build_paste_authority_service(settings=settings, store=store)

    defaults = [option.label for option in service.ttl_options() if option.is_default]
    assert defaults == ["1 day"]


@pytest.mark.parametrize("raw", ["99999999999999999999h", "100000000h", "2600000h"])
def test_store_uses_default_ttl_for_out_of_range_input(
    service: DefaultPasteAuthorityService, raw: str
) -> None:
    """Oversized TTL input falls back to the default instead of failing."""
    result = service.store_paste(content=f"ttl {raw}", ttl=raw)

    assert result.ok
    assert result.payload is not None
    assert result.payload.ttl == timedelta(days=7)


def test_store_rejects_text_without_utf8_encoding(
    service: DefaultPasteAuthorityService, substrate
) -> None:
    """Lone surrogates are a validation error with no I/O."""
    result = service.store_paste(content="a\ud800b")

    assert result.has_category(ErrorCategory.VALIDATION)
    assert "valid UTF-8" in result.errors[0].message
    assert substrate.calls == []


def test_builder_provisions_under_child_of_root_token(
    monkeypatch: pytest.MonkeyPatch, store: S3PasteStore
) -> None:
    """Bucket provisioning runs on a bounded child token released afterwards."""
    seen: list[CancellationToken] = []

    def initialize(settings, *, token=None):
        seen.append(token)
        return store

    monkeypatch.setattr(S3PasteStore, "initialize", staticmethod(initialize))
    root = CancellationToken()
    settings = PastebinSettings(
        components={"substrate": {"s3": {"bucket": "pastes"}}}
    )

    build_paste_authority_service(settings=settings, token=root)

    (scoped,) = seen
    assert scoped is not root
    assert scoped.remaining() is not None
    assert scoped.remaining() <= 30.0
    root.cancel()
    assert scoped.cancelled is False


def test_builder_aborts_when_root_token_is_cancelled() -> None:
    """A cancelled root token stops provisioning before any bucket request."""
    root = CancellationToken()
    root.cancel()
    settings = PastebinSettings(
        components={
            "substrate": {
                "s3": {"bucket": "pastes", "endpoint": "localhost:9", "use_ssl": False}
            }
        }
    )

    with pytest.raises(OperationCancelledError, match="head_bucket cancelled"):
        build_paste_authority_service(settings=settings, token=root)
