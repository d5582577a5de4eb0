"""
Public API for deploying a signed plugin build to Ore.

Usage:
    from pathlib import Path

    from ore_deploy.artifacts import discover_build_outputs
    from ore_deploy.config import DeployConfig
    from ore_deploy.deploy import deploy

    config = DeployConfig(plugin_id="myplugin", version="1.0.0", api_key="...")
    outputs = discover_build_outputs(Path("target"), "myplugin-1.0.0", config.version)
    deploy(config, outputs)

Every failure is raised as an ``OreDeployError`` subclass. Nothing touches
the network until the artifacts, the channel and the API key are resolved.
"""

from typing import Optional

from ._upload import OreUploadClient, UploadRequest, UploadResult
from .artifacts import BuildOutputs, resolve_artifacts, validate_readable
from .channels import select_channel
from .config import DeployConfig
from .logging_config import logger
from .secrets import require_api_key


def prepare_upload(config: DeployConfig, outputs: BuildOutputs) -> UploadRequest:
    """
    Resolve everything needed for the upload without any network I/O.

    Args:
        config: Deployment configuration
        outputs: Build outputs to pick the plugin jar and signature from

    Returns:
        UploadRequest ready to submit

    Raises:
        MissingArtifactError: No matching jar and fallback disabled
        MissingSignatureError: The selected jar has no signature
        UnreadableFileError: Jar or signature cannot be read
        MissingApiKeyError: No API key configured for the plugin
        ConfigLoadError: The API key lookup table cannot be loaded
    """
    resolved = resolve_artifacts(outputs, config.classifier, config.fallback_to_main_artifact)

    validate_readable(resolved.artifact.file, "jar artifact")
    validate_readable(resolved.signature.file, "signature artifact")

    channel = select_channel(resolved.is_snapshot, config.release_channel, config.snapshot_channel)

    api_key = require_api_key(
        config.api_key,
        config.plugin_id,
        config.project_properties,
        config.api_key_lookup,
    )

    artifact_file_name = config.file_name or resolved.artifact.file.name
    return UploadRequest(
        plugin_id=config.plugin_id,
        version=config.version,
        api_key=api_key,
        channel=channel,
        artifact_file=resolved.artifact.file,
        artifact_file_name=artifact_file_name,
        signature_file=resolved.signature.file,
        signature_file_name=f"{artifact_file_name}.sig",
        is_snapshot=resolved.is_snapshot,
    )


def publish(request: UploadRequest, client: OreUploadClient) -> UploadResult:
    """
    Submit a prepared upload once and raise if it did not succeed.

    Raises:
        UploadRejected: The server answered with a non-201 status
        TransportError: The request failed before a response arrived
    """
    logger.info(f"Uploading plugin to {client.upload_url(request)} in channel {request.channel}")
    result = client.upload(request)
    result.raise_for_outcome()

    logger.info(f"Plugin {request.plugin_id} {request.version} uploaded successfully")
    return result


def deploy(
    config: DeployConfig,
    outputs: BuildOutputs,
    client: Optional[OreUploadClient] = None,
) -> UploadResult:
    """
    Upload the plugin jar and signature described by ``outputs``.

    Args:
        config: Deployment configuration
        outputs: Build outputs to pick the plugin jar and signature from
        client: Optional pre-built upload client

    Returns:
        The successful UploadResult

    Raises:
        OreDeployError: Any resolution failure, UploadRejected or TransportError
    """
    request = prepare_upload(config, outputs)
    client = client or OreUploadClient(base_url=config.base_url, timeout=config.timeout)
    return publish(request, client)
