"""Input validation for topicsync.

Record validators return the full list of violated constraints so callers
can raise one ValidationError that names all of them. The string and URL
helpers are shared by the CLI and the config layer.
"""

import logging
import re
from typing import Any, Dict, List, Optional

from topicsync.types import TopicType

logger = logging.getLogger(__name__)

MAX_TOPIC_NAME_LENGTH = 50
MAX_TOPIC_DESCRIPTION_LENGTH = 2000

# Fields a caller may never set directly; the owning repo stamps them
READ_ONLY_FIELDS = frozenset({"id", "create_time", "update_time", "openid"})

TOPIC_FIELDS = frozenset({"name", "description", "pin_weight"})
TOPIC_LOG_FIELDS = frozenset({"topic_id", "topic_type", "content", "extra_data", "mark"})


def validate_topic(data: Dict[str, Any], partial: bool = False) -> List[str]:
    """Validate topic create/update data.

    Args:
        data: Field values keyed by Topic attribute name.
        partial: If True (updates), only the fields present are checked and
            ``name`` may be omitted.

    Returns:
        List of error messages; empty when valid.
    """
    errors = []

    if "name" in data or not partial:
        name = data.get("name")
        if not isinstance(name, str) or not name.strip():
            errors.append("name cannot be empty")
        elif len(name) > MAX_TOPIC_NAME_LENGTH:
            errors.append(f"name cannot exceed {MAX_TOPIC_NAME_LENGTH} characters")

    description = data.get("description")
    if description is not None:
        if not isinstance(description, str):
            errors.append("description must be a string")
        elif len(description) > MAX_TOPIC_DESCRIPTION_LENGTH:
            errors.append(
                f"description cannot exceed {MAX_TOPIC_DESCRIPTION_LENGTH} characters"
            )

    if "pin_weight" in data:
        pin_weight = data["pin_weight"]
        if isinstance(pin_weight, bool) or not isinstance(pin_weight, int) or pin_weight < 0:
            errors.append("pin_weight must be a non-negative integer")

    return errors


def validate_topic_log(data: Dict[str, Any], partial: bool = False) -> List[str]:
    """Validate topic log create/update data.

    Returns:
        List of error messages; empty when valid.
    """
    errors = []

    if "topic_type" in data or not partial:
        if not _is_topic_type(data.get("topic_type")):
            errors.append("topic_type is invalid")

    if "topic_id" in data or not partial:
        topic_id = data.get("topic_id")
        if isinstance(topic_id, bool) or not isinstance(topic_id, int) or topic_id <= 0:
            errors.append("topic_id is invalid")

    if "content" in data or not partial:
        content = data.get("content")
        if not isinstance(content, str) or not content.strip():
            errors.append("content cannot be empty")

    extra_data = data.get("extra_data")
    if extra_data is not None and not isinstance(extra_data, dict):
        errors.append("extra_data must be an object")

    mark = data.get("mark")
    if mark is not None and (isinstance(mark, bool) or not isinstance(mark, int) or mark < 0):
        errors.append("mark must be a non-negative integer")

    return errors


def _is_topic_type(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    try:
        TopicType(value)
    except ValueError:
        return False
    return True


def editable_fields(data: Dict[str, Any], allowed: frozenset) -> Dict[str, Any]:
    """Drop read-only, unknown and None-valued fields from update data."""
    return {
        key: value
        for key, value in data.items()
        if key in allowed and key not in READ_ONLY_FIELDS and value is not None
    }


def sanitize_string(
    value: Any, field_name: str, max_length: int = 1000, required: bool = True
) -> str:
    """Sanitize and validate string inputs from the CLI.

    Raises:
        ValueError: If validation fails.
    """
    if value is None and not required:
        return ""

    if not isinstance(value, str):
        raise ValueError(f"{field_name} must be a string, got {type(value).__name__}")

    if required and not value.strip():
        raise ValueError(f"{field_name} cannot be empty")

    if len(value) > max_length:
        raise ValueError(f"{field_name} too long (max {max_length} characters, got {len(value)})")

    # Remove null bytes and control characters except newlines and tabs
    return re.sub(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]", "", value)


def validate_backend_url(url: str) -> Optional[str]:
    """Validate a backend URL before sending a bearer token to it.

    Rejects non-http/https schemes, URLs with no host, and remote HTTP
    endpoints (only localhost/127.0.0.1 are allowed over plaintext HTTP).

    Returns:
        The URL unchanged if valid, or ``None`` if rejected (with a warning
        logged for the rejection reason).
    """
    if not url:
        return None
    from urllib.parse import urlparse

    parsed = urlparse(url)
    if parsed.scheme not in {"https", "http"}:
        logger.warning("Invalid backend_url scheme; only http/https allowed.")
        return None
    if not parsed.netloc:
        logger.warning("Invalid backend_url; missing host.")
        return None
    if parsed.scheme == "http":
        host = parsed.hostname or ""
        if host not in {"localhost", "127.0.0.1"}:
            logger.warning("Refusing non-local http backend_url for security.")
            return None
    return url
