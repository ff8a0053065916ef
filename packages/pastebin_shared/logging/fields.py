"""Canonical logging field names for structured log consistency.

These constants define a stable key set for structured logs and context
propagation. Keeping names centralized prevents drift between the service,
the sweeper and the HTTP layer.
"""

TIMESTAMP = "timestamp"
LEVEL = "level"
LOGGER = "logger"
MESSAGE = "message"
EVENT = "event"

# Public API invocation fields.
COMPONENT_ID = "component_id"
API_NAME = "api_name"
PUBLIC_API_INVOCATION_EVENT = "public_api_invocation"
PUBLIC_API_COMPLETION_EVENT = "public_api_completion"
PUBLIC_API_INSTRUMENTATION_FAILURE_EVENT = "public_api_instrumentation_failure"
SUCCESS = "success"
DURATION_MS = "duration_ms"
ERRORS = "errors"
OUTCOME = "outcome"
ERROR_CATEGORY = "error_category"
STAGE = "stage"
CONCERN = "concern"

# Paste lifecycle fields.
CHECKSUM = "checksum"
SIZE = "size"
TTL = "ttl"
SWEEP_STATE = "sweep_state"
SWEEP_SCANNED = "scanned"
SWEEP_EXPIRED = "expired"
SWEEP_DELETED = "deleted"
SWEEP_FAILED = "failed"
INTERVAL = "interval"

# Common service-level fields.
SERVICE = "service"
ENVIRONMENT = "environment"
VERSION = "version"
