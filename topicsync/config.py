"""Credential and backend configuration for topicsync.

Priority when resolving the backend connection:
1. Environment variables (TOPICSYNC_BACKEND_URL, TOPICSYNC_AUTH_TOKEN)
2. ``<data dir>/credentials.json``
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from topicsync.utils import get_topicsync_home
from topicsync.validation import validate_backend_url

logger = logging.getLogger(__name__)

ENV_BACKEND_URL = "TOPICSYNC_BACKEND_URL"
ENV_AUTH_TOKEN = "TOPICSYNC_AUTH_TOKEN"


def get_credentials_path() -> Path:
    """Get the path to the credentials file."""
    return get_topicsync_home() / "credentials.json"


def load_credentials() -> Optional[Dict[str, Any]]:
    """Load credentials from the credentials file, or None if absent/unreadable."""
    creds_path = get_credentials_path()
    if not creds_path.exists():
        return None
    try:
        with open(creds_path) as f:
            creds = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.debug(f"Failed to load credentials file: {e}")
        return None
    return creds if isinstance(creds, dict) else None


def save_credentials(credentials: Dict[str, Any]) -> Path:
    """Write credentials with owner-only permissions."""
    creds_path = get_credentials_path()
    creds_path.parent.mkdir(parents=True, exist_ok=True)
    with open(creds_path, "w") as f:
        json.dump(credentials, f, indent=2)
    creds_path.chmod(0o600)
    return creds_path


def clear_credentials() -> bool:
    """Remove the credentials file. Returns False if there was none."""
    creds_path = get_credentials_path()
    if creds_path.exists():
        creds_path.unlink()
        return True
    return False


def resolve_backend_config() -> Dict[str, Optional[str]]:
    """Resolve backend_url and auth_token from env and the credentials file.

    An unsafe backend URL is dropped (``backend_url`` becomes None).
    """
    creds = load_credentials() or {}

    backend_url = os.environ.get(ENV_BACKEND_URL) or creds.get("backend_url")
    # Accept "token" as a legacy alias of "auth_token"
    auth_token = (
        os.environ.get(ENV_AUTH_TOKEN) or creds.get("auth_token") or creds.get("token")
    )

    if backend_url:
        backend_url = validate_backend_url(backend_url)
        if backend_url:
            backend_url = backend_url.rstrip("/")

    return {
        "backend_url": backend_url,
        "auth_token": auth_token,
        "user_id": creds.get("user_id"),
    }
