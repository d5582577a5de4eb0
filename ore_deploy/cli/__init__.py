"""CLI module for ore-deploy.

This module provides the command-line interface for uploading plugin builds.
It supports both CLI arguments and environment variables for configuration.
"""

from .main import (
    build_config,
    cli,
    initialize_sentry,
    main,
    parse_project_properties,
    run_deploy,
)

__all__ = [
    "cli",
    "main",
    "build_config",
    "initialize_sentry",
    "parse_project_properties",
    "run_deploy",
]
