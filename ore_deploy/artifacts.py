"""Build artifact lookup for plugin deployment.

Build outputs are plain ``BuildArtifact`` records. A build tool adapter (or
``discover_build_outputs`` for a Maven style ``target/`` directory) produces
them; everything below only looks at the records and the files they point to.
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from .exceptions import MissingArtifactError, MissingSignatureError, UnreadableFileError
from .logging_config import logger

JAR_TYPE = "jar"
SIGNATURE_TYPE = "jar.asc"

# Maven timestamped snapshot versions, e.g. 1.0.0-20240101.120000-3
_TIMESTAMP_SNAPSHOT = re.compile(r"^.*-\d{8}\.\d{6}-\d+$")


@dataclass(frozen=True)
class BuildArtifact:
    """
    A single file produced by the build.

    Attributes:
        classifier: Qualifier such as "sources", or None for the primary output
        type: File type suffix ("jar", "jar.asc", ...)
        file: Location of the file on disk
        is_snapshot: Whether the artifact belongs to a snapshot version
    """

    classifier: Optional[str]
    type: str
    file: Path
    is_snapshot: bool = False

    def __str__(self) -> str:
        classifier = f":{self.classifier}" if self.classifier else ""
        return f"{self.file.name} ({self.type}{classifier})"


@dataclass
class BuildOutputs:
    """The main build output plus everything attached to it, in order."""

    main_artifact: Optional[BuildArtifact] = None
    attached: List[BuildArtifact] = field(default_factory=list)


@dataclass(frozen=True)
class ResolvedArtifacts:
    """The plugin jar selected for upload and its detached signature."""

    artifact: BuildArtifact
    signature: BuildArtifact

    @property
    def is_snapshot(self) -> bool:
        return self.artifact.is_snapshot


def find_artifact(
    artifacts: Sequence[BuildArtifact],
    classifier: Optional[str],
    type: str,
) -> Optional[BuildArtifact]:
    """
    Return the first artifact matching classifier and type exactly.

    An unset classifier only matches another unset classifier.

    Args:
        artifacts: Candidate artifacts, scanned in order
        classifier: Requested classifier or None
        type: Requested file type

    Returns:
        The matching artifact, or None
    """
    for artifact in artifacts:
        if artifact.classifier == classifier and artifact.type == type:
            return artifact
    return None


def resolve_artifacts(
    outputs: BuildOutputs,
    classifier: Optional[str],
    fallback_to_main_artifact: bool = True,
) -> ResolvedArtifacts:
    """
    Select the plugin jar and its signature from the build outputs.

    Args:
        outputs: Build outputs to search
        classifier: Requested classifier for the plugin jar
        fallback_to_main_artifact: Use the main build output when nothing matches

    Returns:
        ResolvedArtifacts with the jar and its signature

    Raises:
        MissingArtifactError: No jar matched and fallback is disabled
        MissingSignatureError: The selected jar has no signature
    """
    artifact = find_artifact(outputs.attached, classifier, JAR_TYPE)
    if artifact is None:
        if not fallback_to_main_artifact or outputs.main_artifact is None:
            raise MissingArtifactError(classifier)
        logger.info(f"No artifact with classifier '{classifier}' attached, falling back to the main artifact")
        artifact = outputs.main_artifact

    signature = find_artifact(outputs.attached, artifact.classifier, SIGNATURE_TYPE)
    if signature is None:
        raise MissingSignatureError(artifact)

    logger.debug(f"Resolved artifact {artifact} with signature {signature}")
    return ResolvedArtifacts(artifact=artifact, signature=signature)


def validate_readable(path: Path, description: str = "file") -> None:
    """
    Ensure a path is an existing, regular, readable file.

    Raises:
        UnreadableFileError: If any of those checks fails
    """
    if not path.is_file() or not os.access(path, os.R_OK):
        raise UnreadableFileError(path, description)


def is_snapshot_version(version: str) -> bool:
    """Check a version string against Maven's snapshot conventions."""
    if version.upper().endswith("SNAPSHOT"):
        return True
    return _TIMESTAMP_SNAPSHOT.match(version) is not None


def discover_build_outputs(directory: Path, final_name: str, version: str) -> BuildOutputs:
    """
    Collect build outputs from a Maven style build directory.

    ``{final_name}.jar`` is the main artifact. ``{final_name}-{classifier}.jar``
    files are attached jars, and ``.jar.asc`` files next to any of them are
    attached signatures carrying the same classifier.

    Args:
        directory: Build output directory (usually ``target``)
        final_name: Base file name of the build, without extension
        version: Project version, used to flag snapshot builds

    Returns:
        BuildOutputs describing the directory contents

    Raises:
        UnreadableFileError: If the directory does not exist
    """
    if not directory.is_dir():
        raise UnreadableFileError(directory, "build directory")

    snapshot = is_snapshot_version(version)
    outputs = BuildOutputs()

    for path in sorted(directory.iterdir()):
        if not path.is_file() or not path.name.startswith(final_name):
            continue

        name = path.name
        if name.endswith("." + SIGNATURE_TYPE):
            type_ = SIGNATURE_TYPE
        elif name.endswith("." + JAR_TYPE):
            type_ = JAR_TYPE
        else:
            continue

        stem = name[len(final_name) : -(len(type_) + 1)]
        if stem == "":
            classifier = None
        elif stem.startswith("-") and len(stem) > 1:
            classifier = stem[1:]
        else:
            # Another build sharing the prefix, e.g. "plugin-1.0.jar" vs "plugin-1.0.1.jar"
            continue

        artifact = BuildArtifact(classifier=classifier, type=type_, file=path, is_snapshot=snapshot)
        if classifier is None and type_ == JAR_TYPE:
            outputs.main_artifact = artifact
        else:
            outputs.attached.append(artifact)

    logger.debug(
        f"Discovered {len(outputs.attached)} attached artifact(s) in {directory}; "
        f"main artifact: {outputs.main_artifact}"
    )
    return outputs
