"""Authentication commands for the topicsync CLI.

Logging in is what triggers the one-time migration of local data, so
``auth login`` reports the migration outcome alongside the login.
"""

import json
import logging
import sys
from typing import TYPE_CHECKING

from topicsync.config import (
    clear_credentials,
    get_credentials_path,
    load_credentials,
    resolve_backend_config,
    save_credentials,
)
from topicsync.validation import validate_backend_url

if TYPE_CHECKING:
    from topicsync import TopicSync

logger = logging.getLogger(__name__)


def _mask_secret(secret: str, prefix: int = 4, suffix: int = 4) -> str:
    """Mask a secret for safe display (never returns the full secret)."""
    if not secret:
        return ""
    if len(secret) <= prefix + suffix:
        return "*" * len(secret)
    return f"{secret[:prefix]}...{secret[-suffix:]}"


def cmd_auth(args, ts: "TopicSync"):
    """Handle auth subcommands."""
    if args.auth_action == "login":
        existing = load_credentials() or {}
        backend_url = args.backend_url or existing.get("backend_url") or ts.backend_url
        if not backend_url or not validate_backend_url(backend_url):
            print("✗ A valid backend URL is required (https://, or http://localhost)")
            sys.exit(1)
        backend_url = backend_url.rstrip("/")

        save_credentials({**existing, "backend_url": backend_url, "auth_token": args.token})
        result = ts.login(args.token, backend_url=backend_url)

        if args.json:
            output = {"status": "success", "backend_url": backend_url}
            output["migration"] = result.to_dict() if result is not None else None
            print(json.dumps(output, indent=2))
            return

        print(f"✓ Logged in to {backend_url}")
        if result is None:
            if ts.trigger.last_error is not None:
                print(f"⚠  Local data was not migrated: {ts.trigger.last_error}")
                print("   Your local data is intact; run `topicsync sync` to retry.")
        elif result.attempted:
            print(
                f"  Migrated {result.topics_migrated} topics and "
                f"{result.logs_migrated} logs from local storage"
            )
            if not result.success:
                print(f"⚠  {len(result.errors)} records could not be migrated")
            if not result.local_cleared:
                print("   Your local data is intact; run `topicsync sync` to retry.")

    elif args.auth_action == "logout":
        ts.logout()
        if clear_credentials():
            print("✓ Logged out; credentials removed")
        else:
            print("Not logged in.")

    elif args.auth_action == "status":
        config = resolve_backend_config()
        authenticated = bool(config["auth_token"])
        if args.json:
            print(
                json.dumps(
                    {
                        "authenticated": authenticated,
                        "backend_url": config["backend_url"],
                        "credentials_path": str(get_credentials_path()),
                    },
                    indent=2,
                )
            )
            return
        if not authenticated:
            print("Not authenticated (local mode)")
            return
        print("Authenticated")
        print(f"  Backend: {config['backend_url'] or '(not configured)'}")
        print(f"  Token:   {_mask_secret(config['auth_token'])}")
