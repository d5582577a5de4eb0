"""Request type for plugin version uploads."""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class UploadRequest:
    """
    Everything needed to publish one plugin version.

    Built fresh for every invocation, only after both files have been
    checked for readability.

    Attributes:
        plugin_id: Plugin id on the remote host
        version: Version string to publish
        api_key: Resolved API key
        channel: Upload channel name
        artifact_file: Path to the plugin jar
        artifact_file_name: File name announced for the jar
        signature_file: Path to the detached signature
        signature_file_name: File name announced for the signature
        is_snapshot: Whether this is a snapshot build
    """

    plugin_id: str
    version: str
    api_key: str
    channel: str
    artifact_file: Path
    artifact_file_name: str
    signature_file: Path
    signature_file_name: str
    is_snapshot: bool = False

    def __post_init__(self) -> None:
        """Validate request parameters."""
        if not self.plugin_id:
            raise ValueError("plugin_id is required")
        if not self.version:
            raise ValueError("version is required")
        if not self.api_key:
            raise ValueError("api_key is required")
        if not self.channel:
            raise ValueError("channel is required")

    @property
    def forum_post(self) -> str:
        """Form value asking the host to announce the version on the forums."""
        return "false" if self.is_snapshot else "true"

    @property
    def recommended(self) -> str:
        """Form value marking the version as the recommended download."""
        return "false" if self.is_snapshot else "true"
