"""Configuration validation utilities."""

from typing import Any


def sanitize_validation_errors(errors: list[Any]) -> list[dict[str, str]]:
    """Sanitize Pydantic validation errors for logging.

    Removes noisy/internal fields like:
    - url
    - ctx
    - input (may echo the whole configuration document)
    """
    sanitized: list[dict[str, str]] = []

    for err in errors:
        field = ".".join(str(x) for x in err.get("loc", [])) or "options"
        raw_msg = err.get("msg", "Invalid value")

        # Remove noisy prefixes
        msg = raw_msg.replace("Value error,", "").strip()

        # Friendly rewrites for common cases
        msg_lower = msg.lower()
        if "extra inputs are not permitted" in msg_lower:
            msg = "Unknown option"
        elif "field required" in msg_lower:
            msg = "This field is required"
        elif "valid integer" in msg_lower or "valid boolean" in msg_lower or "valid list" in msg_lower:
            msg = "Invalid value type"

        sanitized.append(
            {
                "field": field,
                "message": msg,
            }
        )

    return sanitized
