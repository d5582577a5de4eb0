"""Click command line interface for ore-deploy.

Every option falls back to an ``ORE_DEPLOY_*`` environment variable, so the
command works the same from a shell, a CI job or a build tool hook:

    ore-deploy --plugin-id myplugin --plugin-version 1.0.0 \\
        --api-key-lookup ~/.ore/keys.properties --build-dir target
"""

import os
import sys
from pathlib import Path
from typing import Dict, Iterable, Optional

import click
import sentry_sdk

from .. import __version__
from .._upload import OreUploadClient, UploadResult
from ..artifacts import discover_build_outputs
from ..config import DeployConfig
from ..console import print_banner, print_final_failure, print_final_success, print_summary_table, print_upload_summary
from ..deploy import prepare_upload, publish
from ..exceptions import (
    ConfigLoadError,
    ConfigurationError,
    MissingApiKeyError,
    MissingArtifactError,
    MissingSignatureError,
    OreDeployError,
    TransportError,
    UnreadableFileError,
    UploadRejected,
)
from ..logging_config import logger, setup_logging

ORE_DEPLOY_VERSION = __version__

# Expected user errors, never reported to Sentry
USER_ERRORS = (
    ConfigurationError,
    ConfigLoadError,
    MissingApiKeyError,
    MissingArtifactError,
    MissingSignatureError,
    UnreadableFileError,
    UploadRejected,
)


def initialize_sentry() -> None:
    """Initialize Sentry for error tracking when a DSN is configured."""
    sentry_dsn = os.getenv("SENTRY_DSN")
    if not sentry_dsn:
        logger.debug("SENTRY_DSN not set, error tracking disabled")
        return

    def before_send(event, hint):
        """
        Filter events before sending to Sentry.
        Don't send user input errors - these are expected failures.
        """
        if "exc_info" in hint:
            exc_type, exc_value, tb = hint["exc_info"]
            if isinstance(exc_value, USER_ERRORS):
                return None
        return event

    sentry_sdk.init(
        dsn=sentry_dsn,
        release=f"ore-deploy@{ORE_DEPLOY_VERSION}",
        send_default_pii=False,
        before_send=before_send,
    )


def parse_project_properties(values: Iterable[str]) -> Dict[str, str]:
    """
    Parse repeated ``-D key=value`` options into a dictionary.

    Raises:
        ConfigurationError: If an entry has no ``=``
    """
    properties: Dict[str, str] = {}
    for entry in values:
        key, sep, value = entry.partition("=")
        if not sep or not key.strip():
            raise ConfigurationError(f"Invalid property '{entry}'. Expected format: 'key=value'")
        properties[key.strip()] = value
    return properties


def build_config(
    plugin_id: Optional[str],
    plugin_version: Optional[str],
    release_channel: str,
    snapshot_channel: str,
    api_key: Optional[str],
    api_key_lookup: Optional[str],
    file_name: Optional[str],
    classifier: Optional[str],
    fallback: bool,
    base_url: str,
    timeout: Optional[float],
    properties: Iterable[str] = (),
) -> DeployConfig:
    """
    Build and validate a DeployConfig from CLI values.

    Raises:
        ConfigurationError: If configuration is invalid
    """
    config = DeployConfig(
        plugin_id=plugin_id or "",
        version=plugin_version or "",
        release_channel=release_channel,
        snapshot_channel=snapshot_channel,
        api_key=api_key,
        api_key_lookup=Path(api_key_lookup).expanduser() if api_key_lookup else None,
        file_name=file_name,
        classifier=classifier or None,
        fallback_to_main_artifact=fallback,
        base_url=base_url,
        project_properties=parse_project_properties(properties),
        timeout=timeout,
    )
    config.validate()
    return config


def run_deploy(config: DeployConfig, build_dir: Path, final_name: str) -> UploadResult:
    """
    Discover the build outputs and upload the plugin.

    Raises:
        OreDeployError: On any resolution or upload failure
    """
    outputs = discover_build_outputs(build_dir, final_name, config.version)
    request = prepare_upload(config, outputs)
    client = OreUploadClient(base_url=config.base_url, timeout=config.timeout)
    url = client.upload_url(request)

    print_summary_table(
        "Deployment",
        [
            ("Plugin id", request.plugin_id),
            ("Version", request.version),
            ("Classifier", config.classifier),
            ("Jar", request.artifact_file),
            ("Channel", request.channel),
            ("Target", url),
        ],
    )

    try:
        result = publish(request, client)
    except (UploadRejected, TransportError) as e:
        print_upload_summary(url, False, channel=request.channel, error_message=str(e))
        raise

    print_upload_summary(url, True, channel=request.channel)
    return result


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(ORE_DEPLOY_VERSION, "--version", prog_name="ore-deploy", message="%(prog)s %(version)s")
@click.option("--plugin-id", envvar="ORE_DEPLOY_PLUGINID", help="Plugin id on the Ore instance.")
@click.option("--plugin-version", envvar="ORE_DEPLOY_VERSION", help="Version to publish.")
@click.option(
    "--release-channel",
    envvar="ORE_DEPLOY_CHANNEL_RELEASE",
    default="release",
    show_default=True,
    help="Channel for release builds.",
)
@click.option(
    "--snapshot-channel",
    envvar="ORE_DEPLOY_CHANNEL_SNAPSHOT",
    default="snapshot",
    show_default=True,
    help="Channel for snapshot builds.",
)
@click.option("--api-key", envvar="ORE_DEPLOY_APIKEY", help="Explicit API key.")
@click.option(
    "--api-key-lookup",
    envvar="ORE_DEPLOY_APIKEY_LOOKUP",
    help="Properties file mapping plugin ids to API keys.",
)
@click.option(
    "-D",
    "--property",
    "properties",
    multiple=True,
    metavar="KEY=VALUE",
    help="Project property, e.g. -D ore.deploy.apikey.myplugin=KEY. Repeatable.",
)
@click.option("--classifier", envvar="ORE_DEPLOY_CLASSIFIER", help="Classifier of the jar to upload.")
@click.option(
    "--fallback/--no-fallback",
    envvar="ORE_DEPLOY_FALLBACKTOMAINARTIFACT",
    default=True,
    show_default=True,
    help="Upload the main jar when no jar with the classifier exists.",
)
@click.option(
    "--build-dir",
    envvar="ORE_DEPLOY_BUILD_DIR",
    default="target",
    show_default=True,
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory holding the built jars and signatures.",
)
@click.option(
    "--final-name",
    envvar="ORE_DEPLOY_FINAL_NAME",
    help="Base name of the built files. [default: <plugin-id>-<plugin-version>]",
)
@click.option(
    "--file-name",
    envvar="ORE_DEPLOY_FILE_NAME",
    help="File name announced for the jar. [default: <final-name>.jar]",
)
@click.option(
    "--base-url",
    envvar="ORE_DEPLOY_BASE_URL",
    default="https://ore.spongepowered.org",
    show_default=True,
    help="Ore instance to upload to.",
)
@click.option(
    "--timeout",
    envvar="ORE_DEPLOY_TIMEOUT",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Request timeout in seconds. Waits indefinitely when unset.",
)
@click.option(
    "--telemetry/--no-telemetry",
    envvar="TELEMETRY",
    default=True,
    show_default=True,
    help="Report unexpected errors to Sentry (requires SENTRY_DSN).",
)
@click.option(
    "--log-level",
    envvar="LOG_LEVEL",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="INFO",
    show_default=True,
)
@click.option(
    "--log-format",
    envvar="LOG_FORMAT",
    type=click.Choice(["text", "json"], case_sensitive=False),
    default="text",
    show_default=True,
    help="Log line format; json emits one object per line.",
)
def cli(
    plugin_id: Optional[str],
    plugin_version: Optional[str],
    release_channel: str,
    snapshot_channel: str,
    api_key: Optional[str],
    api_key_lookup: Optional[str],
    properties: tuple,
    classifier: Optional[str],
    fallback: bool,
    build_dir: Path,
    final_name: Optional[str],
    file_name: Optional[str],
    base_url: str,
    timeout: Optional[float],
    telemetry: bool,
    log_level: str,
    log_format: str,
) -> None:
    """Upload a signed plugin build to Ore.

    The jar is picked from the build directory by classifier, its
    detached .jar.asc signature is uploaded alongside, and snapshot
    versions go to the snapshot channel.
    """
    setup_logging(log_level, structured=log_format.lower() == "json")
    print_banner(ORE_DEPLOY_VERSION)

    if telemetry:
        initialize_sentry()

    try:
        config = build_config(
            plugin_id=plugin_id,
            plugin_version=plugin_version,
            release_channel=release_channel,
            snapshot_channel=snapshot_channel,
            api_key=api_key,
            api_key_lookup=api_key_lookup,
            file_name=file_name,
            classifier=classifier,
            fallback=fallback,
            base_url=base_url,
            timeout=timeout,
            properties=properties,
        )
        final_name = final_name or f"{config.plugin_id}-{config.version}"
        if config.file_name is None:
            config.file_name = f"{final_name}.jar"

        run_deploy(config, build_dir, final_name)
    except OreDeployError as e:
        logger.error(f"{type(e).__name__}: {e}")
        if not isinstance(e, USER_ERRORS):
            sentry_sdk.capture_exception(e)
        print_final_failure(str(e))
        sys.exit(1)

    print_final_success()


def main() -> None:
    """Main entry point for the ore-deploy command."""
    cli()
