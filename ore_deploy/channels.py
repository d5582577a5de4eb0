"""Upload channel selection."""

DEFAULT_RELEASE_CHANNEL = "release"
DEFAULT_SNAPSHOT_CHANNEL = "snapshot"


def select_channel(
    is_snapshot: bool,
    release_channel: str = DEFAULT_RELEASE_CHANNEL,
    snapshot_channel: str = DEFAULT_SNAPSHOT_CHANNEL,
) -> str:
    """Pick the snapshot channel for snapshot builds and the release channel otherwise."""
    return snapshot_channel if is_snapshot else release_channel
