"""Stability AI adapter."""

from .sync_client import SyncVideoClient


class StabilityClient(SyncVideoClient):
    provider_name = "Stability AI"
