"""HTTP client for the Ore version upload endpoint."""

from typing import Optional
from urllib.parse import quote

import requests

from ..http_client import get_default_headers
from ..logging_config import logger
from .protocol import UploadRequest
from .result import UploadResult

# Default Ore instance
ORE_BASE_URL = "https://ore.spongepowered.org"

ORE_DEPLOY_ENDPOINT = "/api/projects/{plugin_id}/versions/{version}"

TEXT_PLAIN = "text/plain"
OCTET_STREAM = "application/octet-stream"


def build_upload_url(base_url: str, plugin_id: str, version: str) -> str:
    """
    Build the version upload URL for a plugin.

    Args:
        base_url: Host base URL, e.g. https://ore.spongepowered.org
        plugin_id: Plugin id, URL-encoded into the path
        version: Version string, URL-encoded into the path

    Returns:
        Full upload URL
    """
    endpoint = ORE_DEPLOY_ENDPOINT.format(
        plugin_id=quote(plugin_id, safe=""),
        version=quote(version, safe=""),
    )
    return base_url.rstrip("/") + endpoint


class OreUploadClient:
    """
    Client submitting plugin versions to an Ore instance.

    Each call to ``upload`` opens its own HTTP session and file handles and
    releases them before returning, so one client can be shared between
    independent uploads.
    """

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None):
        """
        Initialize the upload client.

        Args:
            base_url: Host base URL (defaults to the public Ore instance)
            timeout: Request timeout in seconds, None keeps the requests default of no timeout
        """
        self._base_url = (base_url or ORE_BASE_URL).rstrip("/")
        self._timeout = timeout

    @property
    def base_url(self) -> str:
        return self._base_url

    def upload_url(self, request: UploadRequest) -> str:
        return build_upload_url(self._base_url, request.plugin_id, request.version)

    def upload(self, request: UploadRequest) -> UploadResult:
        """
        Upload a plugin jar and its signature in a single multipart POST.

        Only HTTP 201 counts as success. The request is never retried.

        Args:
            request: UploadRequest describing the version to publish

        Returns:
            UploadResult describing success, rejection or transport failure
        """
        url = self.upload_url(request)

        try:
            with (
                requests.Session() as session,
                request.artifact_file.open("rb") as artifact,
                request.signature_file.open("rb") as signature,
            ):
                # Field order is part of the endpoint contract
                fields = [
                    ("apiKey", (None, request.api_key, TEXT_PLAIN)),
                    ("channel", (None, request.channel, TEXT_PLAIN)),
                    ("pluginFile", (request.artifact_file_name, artifact, OCTET_STREAM)),
                    ("pluginSig", (request.signature_file_name, signature, OCTET_STREAM)),
                    ("forumPost", (None, request.forum_post, TEXT_PLAIN)),
                    ("recommended", (None, request.recommended, TEXT_PLAIN)),
                ]
                response = session.post(
                    url,
                    files=fields,
                    headers=get_default_headers(),
                    timeout=self._timeout,
                )
                try:
                    return self._handle_response(response)
                finally:
                    response.close()
        except requests.exceptions.ConnectionError as e:
            logger.error(f"Failed to connect to {self._base_url}: {e}")
            return UploadResult.transport_error_result(e)
        except requests.exceptions.Timeout as e:
            logger.error(f"Plugin upload to {url} timed out")
            return UploadResult.transport_error_result(e)
        except (requests.exceptions.RequestException, OSError) as e:
            logger.error(f"Plugin upload to {url} failed: {e}")
            return UploadResult.transport_error_result(e)

    @staticmethod
    def _handle_response(response: requests.Response) -> UploadResult:
        status_line = f"{response.status_code} {response.reason or ''}".rstrip()

        if response.status_code != 201:
            # Drain the body so the connection is released and the reason is kept
            body = response.text
            logger.debug(f"Upload rejected with {status_line}: {body[:500]}")
            return UploadResult.rejected_result(response.status_code, status_line, body)

        return UploadResult.success_result(response.status_code, status_line)
