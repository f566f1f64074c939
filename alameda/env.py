"""Addresses of peer services, read from the environment."""

from __future__ import annotations

import os

DEFAULT_DATAHUB_ADDRESS = "datahub.alameda.svc.cluster.local:50050"
DEFAULT_AI_SERVICE_ADDRESS = "alameda-ai.alameda.svc.cluster.local:51"[:-2] + "50051"


def get_datahub_address() -> str:
    """Return the datahub address, falling back to the in-cluster default."""
    return os.environ.get("ALAMEDA_DATAHUB_ADDRESS") or DEFAULT_DATAHUB_ADDRESS


def get_ai_service_address() -> str:
    """Return the AI service address, falling back to the in-cluster default."""
    return os.environ.get("ALAMEDA_AI_SERVER_ADDRESS") or DEFAULT_AI_SERVICE_ADDRESS