"""Analyze/rewrite protocol against the external tone-scoring service."""

from toneguard.service.base import (
    AUDIENCES,
    CONTENT_MEDIUMS,
    LANGUAGES,
    Action,
    ToneRequest,
    ToneTransport,
)
from toneguard.service.client import ToneServiceClient, create_client, create_transport

__all__ = [
    "AUDIENCES",
    "CONTENT_MEDIUMS",
    "LANGUAGES",
    "Action",
    "ToneRequest",
    "ToneServiceClient",
    "ToneTransport",
    "create_client",
    "create_transport",
]
