# favorites_cleanup/utils/clients.py

import json
import logging
from typing import Any, Dict

from google.auth.exceptions import GoogleAuthError
from google.cloud import firestore
from google.oauth2 import service_account

from favorites_cleanup.errors import (
    InvalidCredentialError,
    MalformedCredentialError,
    StoreConnectionError,
)

logger = logging.getLogger(__name__)

REQUIRED_SERVICE_ACCOUNT_FIELDS = (
    "type",
    "project_id",
    "private_key_id",
    "private_key",
    "client_email",
)


def load_service_account(path: str) -> Dict[str, Any]:
    """Read and validate a service account JSON file.

    No network access happens here; a file that fails validation never
    reaches the Firestore client.
    """
    try:
        with open(path, "r", encoding="utf-8") as handle:
            raw = handle.read()
    except FileNotFoundError:
        raise InvalidCredentialError(f"Service account file not found: {path}")
    except OSError as e:
        raise InvalidCredentialError(f"Cannot read service account file {path}: {e}")

    try:
        info = json.loads(raw)
    except ValueError:
        raise MalformedCredentialError(f"Invalid JSON in service account file: {path}")
    if not isinstance(info, dict):
        raise MalformedCredentialError(f"Service account file is not a JSON object: {path}")

    for name in REQUIRED_SERVICE_ACCOUNT_FIELDS:
        value = info.get(name)
        if not isinstance(value, str) or not value.strip():
            raise InvalidCredentialError(f"Invalid service account file: missing field '{name}'")

    logger.debug(f"Loaded service account {info['client_email']} for project {info['project_id']}")
    return info


def get_firestore(info: Dict[str, Any]) -> firestore.Client:
    """Build a Firestore client from validated service account info."""
    try:
        logger.info("Initializing Firestore client...")
        credentials = service_account.Credentials.from_service_account_info(info)
        return firestore.Client(project=info["project_id"], credentials=credentials)
    except (GoogleAuthError, ValueError) as e:
        logger.debug("Failed to build Firestore client", exc_info=True)
        raise StoreConnectionError(f"Failed to initialize Firestore: {e}")
