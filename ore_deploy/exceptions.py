"""Custom exceptions for ore-deploy."""

from pathlib import Path
from typing import TYPE_CHECKING, Optional, Union

if TYPE_CHECKING:
    from .artifacts import BuildArtifact


class OreDeployError(Exception):
    """Base exception for all ore-deploy operations."""


class ConfigurationError(OreDeployError):
    """Raised when configuration validation fails."""


class MissingArtifactError(OreDeployError):
    """Raised when no artifact matches the requested classifier and fallback is disabled."""

    def __init__(self, classifier: Optional[str]):
        self.classifier = classifier
        super().__init__(f"Artifact with classifier '{classifier}' was not found!")


class MissingSignatureError(OreDeployError):
    """Raised when the selected artifact has no detached signature attached."""

    def __init__(self, artifact: "BuildArtifact"):
        self.artifact = artifact
        super().__init__(f"No signature has been attached for the selected artifact: {artifact}")


class UnreadableFileError(OreDeployError):
    """Raised when a resolved file is missing, not a regular file, or unreadable."""

    def __init__(self, path: Union[str, Path], description: str = "file"):
        self.path = Path(path)
        super().__init__(f"Unable to read the {description}: {self.path}")


class MissingApiKeyError(OreDeployError):
    """Raised when no configured source yields an API key."""

    def __init__(self, plugin_id: str):
        self.plugin_id = plugin_id
        super().__init__(f"No API key found for the plugin id '{plugin_id}'!")


class ConfigLoadError(OreDeployError):
    """Raised when the API key lookup table cannot be read or parsed."""


class UploadRejected(OreDeployError):
    """Raised when the remote endpoint answers with anything but 201 Created."""

    def __init__(self, status_code: int, status_line: str, response_body: str):
        self.status_code = status_code
        self.status_line = status_line
        self.response_body = response_body
        super().__init__(
            "Plugin upload failed because the remote endpoint returned an unsuccessful response: "
            f"{status_line}\n{response_body}"
        )


class TransportError(OreDeployError):
    """Raised when the upload fails at the network or I/O level."""

    def __init__(self, cause: BaseException):
        self.cause = cause
        super().__init__(f"Upload failed due to IO error: {cause}")
