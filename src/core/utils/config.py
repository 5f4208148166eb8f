"""Loading of cleanup options from the Lambda environment.

The options are a JSON object in ``AMI_CLEANUP_OPTIONS``; a missing or
blank variable means "use every default".
"""

import json
import os
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from core.models.errors import ConfigurationError
from core.models.options import CleanupOptions
from core.utils.constants import (
    ENV_AMI_CLEANUP_OPTIONS,
    ERROR_CODE_CONFIGURATION_MALFORMED_JSON,
)
from core.utils.validators import sanitize_validation_errors


def parse_cleanup_options(overrides: Mapping[str, Any] | None) -> CleanupOptions:
    """Merge overrides over the defaults.

    Raises:
        ConfigurationError: If any override is invalid
    """
    try:
        return CleanupOptions.merged(overrides)

    except ValidationError as exc:
        raise ConfigurationError(
            message="Invalid cleanup options",
            details={"errors": sanitize_validation_errors(exc.errors())},
        ) from exc


def load_cleanup_options(raw: str | None = None) -> CleanupOptions:
    """Load options from ``raw`` JSON, or from the environment when omitted.

    Raises:
        ConfigurationError: If the document is not a valid JSON object
            or contains invalid options
    """
    if raw is None:
        raw = os.getenv(ENV_AMI_CLEANUP_OPTIONS)

    if not raw or not raw.strip():
        return CleanupOptions()

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(
            message=f"{ENV_AMI_CLEANUP_OPTIONS} is not valid JSON",
            error_code=ERROR_CODE_CONFIGURATION_MALFORMED_JSON,
            details={"line": exc.lineno, "column": exc.colno},
        ) from exc

    if not isinstance(data, dict):
        raise ConfigurationError(
            message=f"{ENV_AMI_CLEANUP_OPTIONS} must be a JSON object",
            details={"type": type(data).__name__},
        )

    return parse_cleanup_options(data)
