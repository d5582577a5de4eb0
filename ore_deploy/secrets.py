"""API key resolution.

Sources are checked in order and the first non-blank value wins:

1. An explicitly configured key
2. The project property ``ore.deploy.apikey.<pluginId>``
3. The ``<pluginId>`` entry of a lookup file in Java properties format

The lookup file is read on every resolution and never cached.
"""

import os
import re
from pathlib import Path
from typing import Dict, Iterator, List, Mapping, Optional, Tuple, Union

from .exceptions import ConfigLoadError, MissingApiKeyError
from .logging_config import logger

PROJECT_PROPERTY_PREFIX = "ore.deploy.apikey."

_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}
_SEPARATORS = "=:"
_WHITESPACE = " \t\f"
_UNICODE_ESCAPE = re.compile(r"[0-9a-fA-F]{4}")


def _non_blank(value: Optional[str]) -> Optional[str]:
    if value is None or not value.strip():
        return None
    return value.strip()


def _logical_lines(text: str) -> Iterator[str]:
    """Join backslash-continued lines and drop comments and blank lines."""
    pending: List[str] = []
    for raw in text.splitlines():
        line = raw.lstrip(_WHITESPACE)
        if not pending and (not line or line[0] in "#!"):
            continue

        # An odd number of trailing backslashes continues the line
        trailing = len(line) - len(line.rstrip("\\"))
        if trailing % 2 == 1:
            pending.append(line[:-1])
            continue

        pending.append(line)
        yield "".join(pending)
        pending = []

    if pending:
        yield "".join(pending)


def _unescape(value: str) -> str:
    result: List[str] = []
    i = 0
    while i < len(value):
        char = value[i]
        if char != "\\" or i + 1 >= len(value):
            result.append(char)
            i += 1
            continue

        nxt = value[i + 1]
        if nxt == "u":
            digits = value[i + 2 : i + 6]
            if not _UNICODE_ESCAPE.fullmatch(digits):
                raise ValueError(f"Malformed \\uXXXX encoding: {value[i : i + 6]!r}")
            result.append(chr(int(digits, 16)))
            i += 6
            continue
        result.append(_ESCAPES.get(nxt, nxt))
        i += 2
    return "".join(result)


def _split_entry(line: str) -> Tuple[str, str]:
    """Split a logical line into key and value at the first unescaped separator."""
    i = 0
    while i < len(line):
        char = line[i]
        if char == "\\":
            i += 2
            continue
        if char in _SEPARATORS or char in _WHITESPACE:
            break
        i += 1

    key = line[:i]
    rest = line[i:].lstrip(_WHITESPACE)
    if rest and rest[0] in _SEPARATORS:
        rest = rest[1:].lstrip(_WHITESPACE)
    return _unescape(key), _unescape(rest)


def parse_properties(text: str) -> Dict[str, str]:
    """
    Parse Java ``.properties`` content into a flat dictionary.

    Supports ``#``/``!`` comments, ``=``, ``:`` or whitespace separators,
    backslash line continuations and the standard escape sequences.
    Later duplicate keys override earlier ones.

    Raises:
        ValueError: On malformed unicode escapes
    """
    table: Dict[str, str] = {}
    for line in _logical_lines(text):
        key, value = _split_entry(line)
        table[key] = value
    return table


def _is_readable_file(path: Path) -> bool:
    return path.is_file() and os.access(path, os.R_OK)


def load_key_lookup(path: Union[str, Path]) -> Dict[str, str]:
    """
    Load a plugin id to API key lookup table.

    Args:
        path: Properties file with one ``pluginId=apiKey`` entry per line

    Returns:
        Mapping of plugin id to API key

    Raises:
        ConfigLoadError: If the file cannot be read or parsed
    """
    try:
        with Path(path).open("r", encoding="utf-8") as f:
            content = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigLoadError(f"Failed to load API key lookup table: {e}") from e

    try:
        return parse_properties(content)
    except ValueError as e:
        raise ConfigLoadError(f"Failed to parse API key lookup table {path}: {e}") from e


def resolve_api_key(
    explicit: Optional[str],
    plugin_id: str,
    project_properties: Optional[Mapping[str, str]] = None,
    lookup_file_path: Optional[Union[str, Path]] = None,
) -> Optional[str]:
    """
    Resolve the API key for a plugin.

    Blank values count as unset in every source.

    Args:
        explicit: Explicitly configured key
        plugin_id: Plugin id on the remote host
        project_properties: Project properties, searched for ``ore.deploy.apikey.<plugin_id>``
        lookup_file_path: Optional lookup file, consulted only when readable

    Returns:
        The API key, or None if no source yields one

    Raises:
        ConfigLoadError: If the lookup file is readable but cannot be loaded
    """
    api_key = _non_blank(explicit)
    if api_key:
        logger.debug("Using explicitly configured API key")
        return api_key

    property_name = PROJECT_PROPERTY_PREFIX + plugin_id
    api_key = _non_blank((project_properties or {}).get(property_name))
    if api_key:
        logger.debug(f"Using API key from project property '{property_name}'")
        return api_key

    if lookup_file_path is not None:
        lookup_path = Path(lookup_file_path)
        if _is_readable_file(lookup_path):
            api_key = _non_blank(load_key_lookup(lookup_path).get(plugin_id))
            if api_key:
                logger.debug(f"Using API key from lookup table {lookup_path}")
                return api_key
        else:
            logger.debug(f"API key lookup table {lookup_path} is not readable, skipping")

    return None


def require_api_key(
    explicit: Optional[str],
    plugin_id: str,
    project_properties: Optional[Mapping[str, str]] = None,
    lookup_file_path: Optional[Union[str, Path]] = None,
) -> str:
    """
    Resolve the API key for a plugin, failing if none is configured.

    Raises:
        MissingApiKeyError: If no source yields a key
        ConfigLoadError: If the lookup file cannot be loaded
    """
    api_key = resolve_api_key(explicit, plugin_id, project_properties, lookup_file_path)
    if api_key is None:
        raise MissingApiKeyError(plugin_id)
    return api_key
