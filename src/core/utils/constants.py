"""Global constants used throughout the application.

This module centralizes all magic numbers, string literals, and configuration
values that are used across multiple modules. Using constants prevents hardcoding
values and makes it easy to change them globally.
"""

from typing import Final

# ============================================================================
# Error Codes
# ============================================================================

# Configuration Errors
ERROR_CODE_CONFIGURATION_INVALID = "CONFIGURATION_INVALID"
ERROR_CODE_CONFIGURATION_MALFORMED_JSON = "CONFIGURATION_MALFORMED_JSON"

# Reference Collection Errors
ERROR_CODE_REFERENCE_COLLECTION_FAILED = "REFERENCE_COLLECTION_FAILED"
ERROR_CODE_SSM_PARAMETER_LIST_FAILED = "SSM_PARAMETER_LIST_FAILED"
ERROR_CODE_LAUNCH_TEMPLATE_LIST_FAILED = "LAUNCH_TEMPLATE_LIST_FAILED"

# Inventory Errors
ERROR_CODE_IMAGE_LIST_FAILED = "IMAGE_LIST_FAILED"

# Deletion Errors
ERROR_CODE_IMAGE_DEREGISTER_FAILED = "IMAGE_DEREGISTER_FAILED"
ERROR_CODE_SNAPSHOT_DELETE_FAILED = "SNAPSHOT_DELETE_FAILED"


# ============================================================================
# Cleanup Defaults
# ============================================================================

DEFAULT_MINIMUM_DAYS_OLD: Final[int] = 30

DEFAULT_IMAGE_FILTERS: Final[tuple[tuple[str, tuple[str, ...]], ...]] = (
    ("state", ("available",)),
    ("image-type", ("machine",)),
)

# ============================================================================
# Reference Lookup
# ============================================================================

# Only SSM parameters whose name contains this marker are resolved.
SSM_PARAMETER_NAME_MARKER: Final[str] = "ami-id"
LAUNCH_TEMPLATE_DEFAULT_VERSION: Final[str] = "$Default"
IMAGE_OWNER_SELF: Final[str] = "self"

# ============================================================================
# Execution Limits
# ============================================================================

DELETE_PACING_SECONDS: Final[float] = 0.1
MAX_SNAPSHOT_WORKERS: Final[int] = 4

# Stop starting new deletions when less time than this remains in the invocation.
DEADLINE_SAFETY_MARGIN_MS: Final[int] = 10_000

# ============================================================================
# Observability
# ============================================================================

DEFAULT_SERVICE_NAME = "ami-housekeeper"
DEFAULT_METRICS_NAMESPACE = "AmiHousekeeper"

METRIC_IMAGES_NOT_IN_USE = "ImagesNotInUse"
METRIC_IMAGES_DELETED = "ImagesDeleted"
METRIC_IMAGES_SKIPPED = "ImagesSkipped"
METRIC_IMAGES_FAILED = "ImagesFailed"
METRIC_SNAPSHOTS_DELETED = "SnapshotsDeleted"
METRIC_SNAPSHOTS_FAILED = "SnapshotsFailed"

# ============================================================================
# Environment Variable Names
# ============================================================================

ENV_AMI_CLEANUP_OPTIONS = "AMI_CLEANUP_OPTIONS"
ENV_AWS_ENDPOINT_URL = "AWS_ENDPOINT_URL"
ENV_AWS_REGION = "AWS_REGION"
ENV_POWERTOOLS_SERVICE_NAME = "POWERTOOLS_SERVICE_NAME"
ENV_POWERTOOLS_METRICS_NAMESPACE = "POWERTOOLS_METRICS_NAMESPACE"
