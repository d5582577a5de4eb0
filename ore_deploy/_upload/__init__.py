"""Plugin version upload to Ore.

Usage:
    from ore_deploy._upload import OreUploadClient, UploadRequest

    client = OreUploadClient(base_url="https://ore.spongepowered.org")
    result = client.upload(UploadRequest(
        plugin_id="myplugin",
        version="1.0.0",
        api_key="...",
        channel="release",
        artifact_file=Path("target/myplugin-1.0.0.jar"),
        artifact_file_name="myplugin-1.0.0.jar",
        signature_file=Path("target/myplugin-1.0.0.jar.asc"),
        signature_file_name="myplugin-1.0.0.jar.sig",
    ))
    result.raise_for_outcome()
"""

from .client import ORE_BASE_URL, OreUploadClient, build_upload_url
from .protocol import UploadRequest
from .result import UploadOutcome, UploadResult

__all__ = [
    "ORE_BASE_URL",
    "OreUploadClient",
    "UploadOutcome",
    "UploadRequest",
    "UploadResult",
    "build_upload_url",
]
