"""RunwayML Gen-4 adapter."""

from typing import Any, Dict

from .sync_client import SyncVideoClient

RUNWAY_API_VERSION = "2024-11-06"


class RunwayClient(SyncVideoClient):
    """RunwayML image/text-to-video client.

    Gen-4 requests always switch on style consistency, camera controls and
    keyframe controls.
    """

    provider_name = "RunwayML"

    def _get_headers(self, api_key: str) -> Dict[str, str]:
        headers = super()._get_headers(api_key)
        headers["X-Runway-Version"] = RUNWAY_API_VERSION
        return headers

    def fixed_fields(self) -> Dict[str, Any]:
        return {
            "style_consistency": True,
            "camera_controls": True,
            "keyframe_controls": True,
        }
