"""Shared fakes and fixtures for Paste Authority Service tests."""

from __future__ import annotations

from typing import Iterator

import pytest

from packages.pastebin_shared.cancellation import CancellationToken
from resources.substrates.s3 import (
    S3HealthStatus,
    S3ObjectNotFoundError,
    S3SubstrateDependencyError,
)
from services.state.paste_authority.data import S3PasteStore


class InMemorySubstrate:
    """Dict-backed object substrate honoring tokens and injected failures."""

    def __init__(self) -> None:
        self.objects: dict[str, bytes] = {}
        self.content_types: dict[str, str] = {}
        self.calls: list[tuple[str, str]] = []
        self.failures: dict[tuple[str, str], Exception] = {}
        self.list_failure: Exception | None = None
        self.ready = True

    def fail(self, operation: str, key: str, exc: Exception | None = None) -> None:
        self.failures[(operation, key)] = exc or S3SubstrateDependencyError(
            f"failed to {operation} {key}: InternalError"
        )

    def _enter(
        self, operation: str, key: str, token: CancellationToken | None
    ) -> None:
        if token is not None:
            token.raise_if_cancelled(operation)
        self.calls.append((operation, key))
        failure = self.failures.get((operation, key))
        if failure is not None:
            raise failure

    def ensure_bucket(self, *, token: CancellationToken | None = None) -> bool:
        self._enter("ensure_bucket", "", token)
        return False

    def health(self, *, token: CancellationToken | None = None) -> S3HealthStatus:
        self._enter("health", "", token)
        if self.ready:
            return S3HealthStatus(ready=True, detail="ok")
        return S3HealthStatus(ready=False, detail="bucket probe failed: ClientError")

    def put_object(
        self,
        *,
        key: str,
        body: bytes,
        content_type: str,
        token: CancellationToken | None = None,
    ) -> None:
        self._enter("put", key, token)
        self.objects[key] = body
        self.content_types[key] = content_type

    def get_object(self, *, key: str, token: CancellationToken | None = None) -> bytes:
        self._enter("get", key, token)
        if key not in self.objects:
            raise S3ObjectNotFoundError(key)
        return self.objects[key]

    def head_object(self, *, key: str, token: CancellationToken | None = None) -> bool:
        self._enter("head", key, token)
        return key in self.objects

    def delete_object(self, *, key: str, token: CancellationToken | None = None) -> None:
        self._enter("delete", key, token)
        self.objects.pop(key, None)
        self.content_types.pop(key, None)

    def iter_keys(
        self, *, prefix: str, token: CancellationToken | None = None
    ) -> Iterator[str]:
        if token is not None:
            token.raise_if_cancelled("list_objects")
        if self.list_failure is not None:
            raise self.list_failure
        for key in sorted(self.objects):
            if key.startswith(prefix):
                yield key


@pytest.fixture
def substrate() -> InMemorySubstrate:
    """Return one empty in-memory substrate."""
    return InMemorySubstrate()


@pytest.fixture
def store(substrate: InMemorySubstrate) -> S3PasteStore:
    """Return one paste store over the in-memory substrate."""
    return S3PasteStore(substrate=substrate)
