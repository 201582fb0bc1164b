"""Luma Dream Machine adapter."""

from .sync_client import SyncVideoClient


class LumaClient(SyncVideoClient):
    provider_name = "Luma AI"
