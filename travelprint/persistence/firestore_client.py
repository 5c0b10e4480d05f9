"""Firestore async client singleton."""

from __future__ import annotations

import logging
from typing import Any

logger = logging.getLogger(__name__)

_client: Any = None


def get_firestore_client() -> Any:
    """Return a lazy-initialized Firestore AsyncClient.

    Uses Application Default Credentials (ADC). ``GOOGLE_CLOUD_PROJECT`` and
    ``FIRESTORE_EMULATOR_HOST`` are honoured by the client library.
    """
    global _client
    if _client is not None:
        return _client

    from google.cloud.firestore import AsyncClient

    _client = AsyncClient()
    logger.info("Using Google Cloud Firestore (project %s)", _client.project)
    return _client
