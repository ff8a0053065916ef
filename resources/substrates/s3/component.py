"""Component identity for the S3 object substrate resource."""

from __future__ import annotations

RESOURCE_COMPONENT_ID = "substrate_s3"
