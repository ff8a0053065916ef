"""HTTP adapter entrypoints for Paste Authority Service."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, Response
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel

from packages.pastebin_shared.errors import ErrorCategory
from packages.pastebin_shared.logging import fields, get_logger
from packages.pastebin_shared.result import Result
from services.state.paste_authority.data.store import CONTENT_TYPE_TEXT
from services.state.paste_authority.service import PasteAuthorityService

_LOGGER = get_logger(__name__)

_STATUS_BY_CATEGORY = {
    ErrorCategory.VALIDATION: 400,
    ErrorCategory.NOT_FOUND: 404,
    ErrorCategory.EXPIRED: 410,
    ErrorCategory.INTEGRITY: 500,
    ErrorCategory.INTERNAL: 500,
    ErrorCategory.DEPENDENCY: 503,
    ErrorCategory.CANCELLED: 504,
}


class CreatePasteBody(BaseModel):
    """JSON body accepted by ``POST /pastes``."""

    content: str = ""
    ttl: str | None = None


def register_routes(
    *,
    router: APIRouter,
    service: PasteAuthorityService,
    base_url: str = "",
) -> None:
    """Register paste HTTP routes on one router."""

    @router.get("/health")
    def health() -> JSONResponse:
        result = service.health()
        if not result.ok or result.payload is None:
            _raise_for_errors(result)
        status = result.payload
        return JSONResponse(
            status_code=200 if status.substrate_ready else 503,
            content={
                "status": "ok" if status.substrate_ready else "degraded",
                "substrate_ready": status.substrate_ready,
                "detail": status.detail,
            },
        )

    @router.get("/ttl-options")
    def ttl_options() -> list[dict[str, Any]]:
        return [
            {
                "label": option.label,
                "seconds": int(option.duration.total_seconds()),
                "default": option.is_default,
            }
            for option in service.ttl_options()
        ]

    @router.post("/pastes", status_code=201)
    def create_paste(body: CreatePasteBody) -> dict[str, Any]:
        result = service.store_paste(content=body.content, ttl=body.ttl)
        if not result.ok or result.payload is None:
            _raise_for_errors(result)
        stored = result.payload
        return {
            "checksum": stored.checksum,
            "url": _paste_url(base_url, stored.checksum),
            "created_at": stored.created_at.isoformat(),
            "expires_at": stored.expires_at.isoformat(),
            "size": stored.size,
        }

    @router.get("/pastes/{checksum}")
    def view_paste(checksum: str) -> dict[str, Any]:
        view = _fetch_or_raise(service, checksum)
        return {
            "checksum": view.checksum,
            "content": view.content,
            "created_at": view.created_at.isoformat(),
            "expires_at": view.expires_at.isoformat(),
            "size": view.size,
        }

    @router.get("/pastes/{checksum}/raw")
    def raw_paste(checksum: str) -> PlainTextResponse:
        view = _fetch_or_raise(service, checksum)
        return PlainTextResponse(
            view.content,
            media_type=CONTENT_TYPE_TEXT,
            headers={"Cache-Control": "no-cache"},
        )

    @router.delete("/pastes/{checksum}", status_code=204)
    def delete_paste(checksum: str) -> Response:
        result = service.remove_paste(checksum=checksum)
        if not result.ok:
            _raise_for_errors(result, malformed_id_status=404)
        return Response(status_code=204)


def _fetch_or_raise(service: PasteAuthorityService, checksum: str) -> Any:
    """Fetch one paste, deleting it eagerly when it has expired."""
    result = service.fetch_paste(checksum=checksum)
    if result.has_category(ErrorCategory.EXPIRED):
        removal = service.remove_paste(checksum=checksum)
        if not removal.ok:
            _LOGGER.warning(
                "failed to delete expired paste",
                extra={fields.CHECKSUM: checksum},
            )
        raise HTTPException(status_code=410, detail="Paste has expired")
    if not result.ok or result.payload is None:
        _raise_for_errors(result, malformed_id_status=404)
    return result.payload


def _raise_for_errors(result: Result[Any], *, malformed_id_status: int = 400) -> None:
    """Raise one ``HTTPException`` for the first error of a failed result."""
    if not result.errors:
        raise HTTPException(status_code=500, detail="empty result")
    error = result.errors[0]
    if error.category == ErrorCategory.VALIDATION:
        status_code = malformed_id_status
    else:
        status_code = _STATUS_BY_CATEGORY.get(error.category, 500)
    if status_code == 404:
        raise HTTPException(status_code=404, detail="Paste not found")
    raise HTTPException(status_code=status_code, detail=error.message)


def _paste_url(base_url: str, checksum: str) -> str:
    """Return the shareable URL for one paste."""
    return f"{base_url.rstrip('/')}/pastes/{checksum}"
