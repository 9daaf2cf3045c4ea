"""Bridge between CLI arguments and configuration models."""

from __future__ import annotations

import argparse
from typing import Any, Dict

from nativedeps.core.logging import get_logger

LOGGER = get_logger(__name__)


class ConfigBridge:
    """Translates CLI arguments to configuration overrides."""

    @staticmethod
    def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
        """Convert CLI arguments to config override dict.

        Only values given explicitly on the command line are included, so
        config file values survive when a flag is omitted.

        Args:
            args: Parsed CLI arguments.

        Returns:
            Dictionary of config overrides.
        """
        overrides: Dict[str, Any] = {}
        validation: Dict[str, Any] = {}
        install: Dict[str, Any] = {}

        # Use getattr with defaults for subcommand compatibility
        directories = getattr(args, "directories", None)
        if directories:
            validation["directories"] = list(directories)

        dlopen_libraries = getattr(args, "dlopen_libraries", None)
        if dlopen_libraries:
            validation["dlopen_libraries"] = list(dlopen_libraries)

        sdk_language = getattr(args, "sdk_language", None)
        if sdk_language:
            validation["sdk_language"] = sdk_language

        max_workers = getattr(args, "max_workers", None)
        if max_workers is not None:
            validation["max_workers"] = max_workers

        groups = getattr(args, "groups", None)
        if groups:
            install["groups"] = list(groups)

        if validation:
            overrides["validation"] = validation
        if install:
            overrides["install"] = install

        LOGGER.debug(f"CLI overrides: {overrides}")
        return overrides
