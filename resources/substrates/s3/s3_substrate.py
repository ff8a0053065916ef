"""boto3-backed object substrate for S3-compatible buckets."""

from __future__ import annotations

import math
from threading import Lock
from typing import Any, Callable, Iterator

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from packages.pastebin_shared.cancellation import CancellationToken
from packages.pastebin_shared.logging import get_logger
from resources.substrates.s3.config import S3SubstrateSettings
from resources.substrates.s3.substrate import (
    ObjectSubstrate,
    S3HealthStatus,
    S3ObjectNotFoundError,
    S3SubstrateDependencyError,
)

_LOGGER = get_logger(__name__)
_NOT_FOUND_CODES = frozenset({"404", "NoSuchKey", "NoSuchBucket", "NotFound"})
_NEVER_CANCELLED = CancellationToken()


class Boto3S3Substrate(ObjectSubstrate):
    """Persist/retrieve objects in one bucket through a boto3 S3 client."""

    def __init__(
        self,
        *,
        settings: S3SubstrateSettings,
        client: Any = None,
        client_factory: Callable[..., Any] | None = None,
    ) -> None:
        self._settings = settings
        self._bucket = settings.bucket
        if client is None:
            client_factory = client_factory or build_s3_client
            client = client_factory(settings)
        self._client = client
        self._client_factory = client_factory
        self._bounded_clients: dict[int, Any] = {}
        self._lock = Lock()

    @property
    def bucket(self) -> str:
        """Return the bucket name this substrate operates on."""
        return self._bucket

    def ensure_bucket(self, *, token: CancellationToken | None = None) -> bool:
        """Probe the bucket and create it when the probe reports it missing."""
        token = token or _NEVER_CANCELLED
        token.raise_if_cancelled("head_bucket")
        try:
            self._client_for(token).head_bucket(Bucket=self._bucket)
            return False
        except ClientError as exc:
            if not _is_not_found(exc):
                raise _dependency_error("check bucket", exc) from None
        except BotoCoreError as exc:
            raise _dependency_error("check bucket", exc) from None

        token.raise_if_cancelled("create_bucket")
        try:
            self._client_for(token).create_bucket(**self._create_bucket_args())
        except (BotoCoreError, ClientError) as exc:
            raise _dependency_error("create bucket", exc) from None
        _LOGGER.info("created bucket", extra={"bucket": self._bucket})
        return True

    def health(self, *, token: CancellationToken | None = None) -> S3HealthStatus:
        """Return bucket readiness from one ``HeadBucket`` probe."""
        token = token or _NEVER_CANCELLED
        token.raise_if_cancelled("head_bucket")
        try:
            self._client_for(token).head_bucket(Bucket=self._bucket)
        except (BotoCoreError, ClientError) as exc:
            return S3HealthStatus(
                ready=False,
                detail=f"bucket probe failed: {type(exc).__name__}",
            )
        return S3HealthStatus(ready=True, detail="ok")

    def put_object(
        self,
        *,
        key: str,
        body: bytes,
        content_type: str,
        token: CancellationToken | None = None,
    ) -> None:
        """Write one object body with the given content type."""
        token = token or _NEVER_CANCELLED
        token.raise_if_cancelled("put_object")
        try:
            self._client_for(token).put_object(
                Bucket=self._bucket,
                Key=key,
                Body=body,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as exc:
            raise _dependency_error(f"put object {key}", exc) from None

    def get_object(self, *, key: str, token: CancellationToken | None = None) -> bytes:
        """Read one full object body; missing keys raise not-found."""
        token = token or _NEVER_CANCELLED
        token.raise_if_cancelled("get_object")
        try:
            response = self._client_for(token).get_object(
                Bucket=self._bucket, Key=key
            )
        except ClientError as exc:
            if _is_not_found(exc):
                raise S3ObjectNotFoundError(key) from None
            raise _dependency_error(f"get object {key}", exc) from None
        except BotoCoreError as exc:
            raise _dependency_error(f"get object {key}", exc) from None

        body = response["Body"]
        try:
            return body.read()
        except BotoCoreError as exc:
            raise _dependency_error(f"read object {key}", exc) from None
        finally:
            body.close()

    def head_object(self, *, key: str, token: CancellationToken | None = None) -> bool:
        """Return whether one object exists without reading its body."""
        token = token or _NEVER_CANCELLED
        token.raise_if_cancelled("head_object")
        try:
            self._client_for(token).head_object(Bucket=self._bucket, Key=key)
        except ClientError as exc:
            if _is_not_found(exc):
                return False
            raise _dependency_error(f"head object {key}", exc) from None
        except BotoCoreError as exc:
            raise _dependency_error(f"head object {key}", exc) from None
        return True

    def delete_object(self, *, key: str, token: CancellationToken | None = None) -> None:
        """Delete one object key."""
        token = token or _NEVER_CANCELLED
        token.raise_if_cancelled("delete_object")
        try:
            self._client_for(token).delete_object(Bucket=self._bucket, Key=key)
        except (BotoCoreError, ClientError) as exc:
            raise _dependency_error(f"delete object {key}", exc) from None

    def iter_keys(
        self, *, prefix: str, token: CancellationToken | None = None
    ) -> Iterator[str]:
        """Yield keys under ``prefix`` page by page without buffering the listing."""
        token = token or _NEVER_CANCELLED
        paginator = self._client_for(token).get_paginator("list_objects_v2")
        pages = iter(
            paginator.paginate(
                Bucket=self._bucket,
                Prefix=prefix,
                PaginationConfig={"PageSize": self._settings.list_page_size},
            )
        )
        while True:
            token.raise_if_cancelled("list_objects")
            try:
                page = next(pages)
            except StopIteration:
                return
            except (BotoCoreError, ClientError) as exc:
                raise _dependency_error(f"list objects {prefix}", exc) from None
            for item in page.get("Contents", []):
                yield item["Key"]

    def _client_for(self, token: CancellationToken) -> Any:
        """Return a client whose socket timeouts fit the token's deadline.

        Budgets are rounded up to a power of two so at most a handful of
        bounded clients are ever built. Injected clients are used as given.
        """
        remaining = token.remaining()
        if remaining is None or self._client_factory is None:
            return self._client
        budget = _timeout_budget(remaining)
        if budget >= self._settings.read_timeout_seconds:
            return self._client
        with self._lock:
            client = self._bounded_clients.get(budget)
            if client is None:
                client = self._client_factory(self._settings, timeout_seconds=budget)
                self._bounded_clients[budget] = client
        return client

    def _create_bucket_args(self) -> dict[str, Any]:
        """Build ``CreateBucket`` arguments for the configured region."""
        args: dict[str, Any] = {"Bucket": self._bucket}
        if self._settings.region != "us-east-1":
            args["CreateBucketConfiguration"] = {
                "LocationConstraint": self._settings.region
            }
        return args


def build_s3_client(
    settings: S3SubstrateSettings, *, timeout_seconds: float | None = None
) -> Any:
    """Build a path-style boto3 S3 client with internal retries disabled.

    ``timeout_seconds`` caps the configured connect and read timeouts.
    """
    connect_timeout = settings.connect_timeout_seconds
    read_timeout = settings.read_timeout_seconds
    if timeout_seconds is not None:
        connect_timeout = min(connect_timeout, timeout_seconds)
        read_timeout = min(read_timeout, timeout_seconds)
    session = boto3.session.Session()
    access_key = settings.access_key_id or None
    secret_key = settings.secret_access_key.get_secret_value() or None
    return session.client(
        "s3",
        endpoint_url=settings.endpoint_url(),
        region_name=settings.region,
        aws_access_key_id=access_key,
        aws_secret_access_key=secret_key,
        config=BotoConfig(
            s3={"addressing_style": "path"},
            connect_timeout=connect_timeout,
            read_timeout=read_timeout,
            retries={"max_attempts": 1, "mode": "standard"},
        ),
    )


def _is_not_found(exc: ClientError) -> bool:
    """Return whether one client error means the key or bucket is absent."""
    error = exc.response.get("Error", {})
    code = str(error.get("Code", ""))
    status = exc.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
    return code in _NOT_FOUND_CODES or status == 404


def _dependency_error(
    operation: str, exc: BotoCoreError | ClientError
) -> S3SubstrateDependencyError:
    """Wrap one botocore failure without leaking backend response detail."""
    if isinstance(exc, ClientError):
        code = exc.response.get("Error", {}).get("Code", "unknown")
        return S3SubstrateDependencyError(f"failed to {operation}: {code}")
    return S3SubstrateDependencyError(f"failed to {operation}: {type(exc).__name__}")


def _timeout_budget(remaining: float) -> int:
    """Round remaining seconds up to a power of two, at least one second."""
    return 1 << max(0, math.ceil(math.log2(max(remaining, 1.0))))
