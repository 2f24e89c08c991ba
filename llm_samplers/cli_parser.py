"""
Command-line argument parsing for the sampler tool.

This module provides the ArgumentParserSetup class to handle
command-line argument parsing in a modular way.
"""

import argparse
from typing import List, Optional

from .constants import LOG_LEVELS


class ArgumentParserSetup:
    """Handles command-line argument parsing for the sampler tool."""

    @staticmethod
    def create_parser() -> argparse.ArgumentParser:
        """
        Create and configure the argument parser.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="llm-samplers",
            description="Filter candidate tokens through a chain of samplers",
            formatter_class=argparse.ArgumentDefaultsHelpFormatter,
        )

        parser.add_argument(
            "--logits",
            type=str,
            help="Path to a JSON list of scores, a JSON object with 'logits' and "
                 "optional 'token_ids', or a .npy vector",
        )

        parser.add_argument(
            "--config",
            type=str,
            help="Path to YAML sampler chain configuration file",
        )

        parser.add_argument(
            "--sampler",
            dest="samplers",
            action="append",
            default=[],
            metavar="NAME[:OPTIONS]",
            help="Sampler to append to the chain, e.g. 'top-p:p=0.9:min_keep=1' "
                 "(can be repeated; runs after samplers from --config)",
        )

        parser.add_argument(
            "--list-samplers",
            action="store_true",
            help="List available samplers and their options and exit",
        )

        # Logging configuration
        parser.add_argument(
            "--log-level",
            type=str,
            choices=LOG_LEVELS,
            help="Logging level (defaults to the config file value, then WARNING)",
        )

        parser.add_argument(
            "--log-file",
            type=str,
            help="Path to log file (logs to console only if omitted)",
        )

        return parser

    @staticmethod
    def parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
        """
        Parse command-line arguments.

        Args:
            args: Optional list of arguments for testing

        Returns:
            Parsed arguments namespace
        """
        parser = ArgumentParserSetup.create_parser()
        parsed = parser.parse_args(args)
        if not parsed.list_samplers and not parsed.logits:
            parser.error("--logits is required unless --list-samplers is given")
        return parsed
