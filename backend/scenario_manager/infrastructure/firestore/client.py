"""Firestore client construction — credentials and project from settings."""

import logging
import os

from google.auth import default as google_auth_default
from google.cloud import firestore
from google.oauth2 import service_account

from scenario_manager.config import Settings

logger = logging.getLogger(__name__)

_SCOPES = [
    "https://www.googleapis.com/auth/cloud-platform",
    "https://www.googleapis.com/auth/datastore",
]


def build_credentials(credentials_file: str = ""):
    """Service-account key file if one is configured, application default credentials otherwise."""
    key_path = credentials_file or os.environ.get("GOOGLE_APPLICATION_CREDENTIALS")
    if key_path and os.path.exists(key_path):
        return service_account.Credentials.from_service_account_file(key_path, scopes=_SCOPES)
    creds, _ = google_auth_default(scopes=_SCOPES)
    return creds


def create_firestore_clients(settings: Settings) -> tuple[firestore.AsyncClient, firestore.Client]:
    """Async client for requests and a sync client for snapshot listeners.

    Listeners are only available on the sync client; both point at the same
    project and database. When FIRESTORE_EMULATOR_HOST is set the library
    talks to the emulator and no credentials are needed.
    """
    project = settings.firestore_project_id or None
    credentials = None
    if os.environ.get("FIRESTORE_EMULATOR_HOST"):
        logger.info("[Firestore] Using emulator at %s", os.environ["FIRESTORE_EMULATOR_HOST"])
    else:
        credentials = build_credentials(settings.firestore_credentials_file)

    kwargs = {"project": project, "credentials": credentials, "database": settings.firestore_database}
    logger.info("[Firestore] Connecting to project=%s database=%s", project, settings.firestore_database)
    return firestore.AsyncClient(**kwargs), firestore.Client(**kwargs)
