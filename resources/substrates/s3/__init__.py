"""S3 object substrate resource exports."""

from resources.substrates.s3.component import RESOURCE_COMPONENT_ID
from resources.substrates.s3.config import (
    S3SubstrateSettings,
    resolve_s3_substrate_settings,
)
from resources.substrates.s3.s3_substrate import Boto3S3Substrate, build_s3_client
from resources.substrates.s3.substrate import (
    ObjectSubstrate,
    S3HealthStatus,
    S3ObjectNotFoundError,
    S3SubstrateDependencyError,
    S3SubstrateError,
)

__all__ = [
    "RESOURCE_COMPONENT_ID",
    "Boto3S3Substrate",
    "ObjectSubstrate",
    "S3HealthStatus",
    "S3ObjectNotFoundError",
    "S3SubstrateDependencyError",
    "S3SubstrateError",
    "S3SubstrateSettings",
    "build_s3_client",
    "resolve_s3_substrate_settings",
]
