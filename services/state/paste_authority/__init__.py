"""Paste Authority Service native package exports."""

from packages.pastebin_shared.errors import ErrorCategory, ErrorDetail
from packages.pastebin_shared.result import Result
from services.state.paste_authority.component import SERVICE_COMPONENT_ID
from services.state.paste_authority.config import PasteAuthoritySettings
from services.state.paste_authority.domain import (
    HealthStatus,
    Paste,
    PasteMeta,
    PasteView,
    StoredPaste,
    TtlOption,
)
from services.state.paste_authority.implementation import DefaultPasteAuthorityService
from services.state.paste_authority.service import (
    PasteAuthorityService,
    build_paste_authority_service,
)
from services.state.paste_authority.sweeper import (
    RetentionSweeper,
    SweeperState,
    SweepReport,
)

__all__ = [
    "SERVICE_COMPONENT_ID",
    "DefaultPasteAuthorityService",
    "ErrorCategory",
    "ErrorDetail",
    "HealthStatus",
    "Paste",
    "PasteAuthorityService",
    "PasteAuthoritySettings",
    "PasteMeta",
    "PasteView",
    "Result",
    "RetentionSweeper",
    "StoredPaste",
    "SweepReport",
    "SweeperState",
    "TtlOption",
    "build_paste_authority_service",
]
