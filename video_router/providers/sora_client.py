"""OpenAI Sora adapter using the raw video generations endpoint."""

from typing import Any, Dict

from .sync_client import SyncVideoClient

DEFAULT_QUALITY = "hd"


class SoraClient(SyncVideoClient):
    provider_name = "OpenAI Sora"

    def __init__(self, quality: str = DEFAULT_QUALITY, **kwargs):
        super().__init__(**kwargs)
        self.quality = quality

    def fixed_fields(self) -> Dict[str, Any]:
        return {"quality": self.quality}
