"""Firebase service-account discovery.

Credentials are looked up in three places, first match wins:

1. ``FIREBASE_SERVICE_ACCOUNT``: the whole service-account JSON inline,
   for hosted deployments.
2. ``FIREBASE_PROJECT_ID`` + ``FIREBASE_CLIENT_EMAIL`` + ``FIREBASE_PRIVATE_KEY``.
3. A local key file (``serviceAccountKey.json`` by default).
"""

from __future__ import annotations

import json
import pathlib
from typing import Any, Optional

import structlog
from google.oauth2 import service_account

from src.config import Settings

logger = structlog.get_logger()

TOKEN_URI = "https://oauth2.googleapis.com/token"


class CredentialsNotFound(RuntimeError):
    """No usable Firebase service account was configured."""


def _from_inline_json(settings: Settings) -> Optional[dict[str, Any]]:
    if not settings.firebase_service_account:
        return None
    try:
        info = json.loads(settings.firebase_service_account)
    except json.JSONDecodeError as e:
        logger.error("firebase_service_account_parse_failed", error=str(e))
        return None
    if not isinstance(info, dict):
        logger.error("firebase_service_account_parse_failed", error="not a JSON object")
        return None
    return info


def _from_discrete_values(settings: Settings) -> Optional[dict[str, Any]]:
    if not (
        settings.firebase_project_id
        and settings.firebase_client_email
        and settings.firebase_private_key
    ):
        return None
    return {
        "type": "service_account",
        "project_id": settings.firebase_project_id,
        "client_email": settings.firebase_client_email,
        # Env files usually carry the PEM with escaped newlines
        "private_key": settings.firebase_private_key.replace("\\n", "\n"),
        "token_uri": TOKEN_URI,
    }


def _from_file(settings: Settings) -> Optional[dict[str, Any]]:
    path = pathlib.Path(settings.firebase_credentials_file)
    if not path.is_file():
        return None
    return json.loads(path.read_text(encoding="utf-8"))


def load_service_account_info(settings: Settings) -> tuple[dict[str, Any], str]:
    """Find service-account info and report which source supplied it.

    Raises:
        CredentialsNotFound: if none of the three sources is configured
    """
    sources = (
        ("env_json", _from_inline_json),
        ("env_values", _from_discrete_values),
        ("file", _from_file),
    )
    for source, loader in sources:
        info = loader(settings)
        if info is not None:
            logger.info("firebase_credentials_loaded", source=source)
            return info, source

    logger.error(
        "firebase_credentials_not_found",
        hint=(
            "Set FIREBASE_SERVICE_ACCOUNT, or FIREBASE_PROJECT_ID + "
            "FIREBASE_CLIENT_EMAIL + FIREBASE_PRIVATE_KEY, or place "
            f"{settings.firebase_credentials_file} in the working directory"
        ),
    )
    raise CredentialsNotFound("Firebase credentials not found")


def load_credentials(settings: Settings) -> tuple[service_account.Credentials, str]:
    """Build Google credentials and resolve the Firestore project id."""
    info, _ = load_service_account_info(settings)
    credentials = service_account.Credentials.from_service_account_info(info)
    project_id = settings.firebase_project_id or info.get("project_id")
    if not project_id:
        raise CredentialsNotFound("Firebase project id is not configured")
    return credentials, project_id
