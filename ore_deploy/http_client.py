"""HTTP client utilities with consistent user agent."""

from typing import Dict

from . import __version__

USER_AGENT = f"ore-deploy/{__version__}"


def get_default_headers() -> Dict[str, str]:
    """
    Get default HTTP headers for requests to Ore.

    Ore authenticates uploads through the ``apiKey`` form field, so no
    Authorization header is ever added here.
    """
    return {"User-Agent": USER_AGENT}
