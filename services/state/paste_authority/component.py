"""Component identity for the Paste Authority Service."""

from __future__ import annotations

SERVICE_COMPONENT_ID = "service_paste_authority"
