"""Deployment configuration.

The CLI fills ``DeployConfig`` from its options, which fall back to these
environment variables:

- ORE_DEPLOY_PLUGINID: Plugin id on the remote host (required)
- ORE_DEPLOY_VERSION: Version to publish (required)
- ORE_DEPLOY_CHANNEL_RELEASE / ORE_DEPLOY_CHANNEL_SNAPSHOT: Channel names
- ORE_DEPLOY_APIKEY: Explicit API key
- ORE_DEPLOY_APIKEY_LOOKUP: Properties file mapping plugin ids to API keys
- ORE_DEPLOY_FILE_NAME: File name announced for the uploaded jar
- ORE_DEPLOY_CLASSIFIER: Classifier of the jar to upload
- ORE_DEPLOY_FALLBACKTOMAINARTIFACT: Use the main jar if the classifier is missing (default: true)
- ORE_DEPLOY_BASE_URL: Ore instance (default: https://ore.spongepowered.org)
- ORE_DEPLOY_TIMEOUT: Request timeout in seconds (default: none)
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional
from urllib.parse import urlparse

from ._upload.client import ORE_BASE_URL
from .channels import DEFAULT_RELEASE_CHANNEL, DEFAULT_SNAPSHOT_CHANNEL
from .exceptions import ConfigurationError
from .logging_config import logger

LOCALHOST_PATTERNS = ["127.0.0.1", "localhost", "0.0.0.0"]


@dataclass
class DeployConfig:
    """Configuration settings for a plugin deployment."""

    plugin_id: str
    version: str
    release_channel: str = DEFAULT_RELEASE_CHANNEL
    snapshot_channel: str = DEFAULT_SNAPSHOT_CHANNEL
    api_key: Optional[str] = None
    api_key_lookup: Optional[Path] = None
    file_name: Optional[str] = None
    classifier: Optional[str] = None
    fallback_to_main_artifact: bool = True
    base_url: str = ORE_BASE_URL
    project_properties: Dict[str, str] = field(default_factory=dict)
    timeout: Optional[float] = None

    def validate(self) -> None:
        """
        Validate configuration settings.

        Raises:
            ConfigurationError: If configuration is invalid
        """
        if not self.plugin_id or not self.plugin_id.strip():
            raise ConfigurationError("Plugin id is not defined")
        if not self.version or not self.version.strip():
            raise ConfigurationError("Version is not defined")
        if not self.release_channel:
            raise ConfigurationError("Release channel name must not be empty")
        if not self.snapshot_channel:
            raise ConfigurationError("Snapshot channel name must not be empty")
        if self.timeout is not None and self.timeout <= 0:
            raise ConfigurationError("Timeout must be a positive number of seconds")

        self._validate_base_url()

    def _validate_base_url(self) -> None:
        """
        Validate and normalize the base URL.

        Raises:
            ConfigurationError: If URL format is invalid
        """
        try:
            parsed = urlparse(self.base_url)
        except ValueError as e:
            raise ConfigurationError(f"Invalid base URL format: {e}")

        if not parsed.scheme or parsed.scheme not in ("http", "https"):
            raise ConfigurationError("Base URL must start with http:// or https://")

        if not parsed.netloc:
            raise ConfigurationError("Base URL must include a valid hostname")

        # The API key travels in the request body
        if parsed.scheme == "http" and not any(localhost in parsed.netloc for localhost in LOCALHOST_PATTERNS):
            logger.warning("Using HTTP (not HTTPS) for uploads - the API key will be sent unencrypted")

        if self.base_url.endswith("/"):
            self.base_url = self.base_url.rstrip("/")
