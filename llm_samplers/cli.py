"""
Command-line entry point.

Reads candidate scores from a file, runs them through the configured sampler
chain and prints the surviving candidates as JSON.
"""

import json
import sys
from typing import Any, Dict, List, Optional

import numpy as np

from .cli_parser import ArgumentParserSetup
from .config_schema import validate_config_file
from .errors import ConfigurationError, SamplerError, log_exception, logger, setup_logging
from .factory import SamplerFactory
from .types import Logits


def load_logits(path: str) -> Logits:
    """
    Load candidate scores from a JSON or .npy file.

    Raises:
        ConfigurationError: If the file cannot be read or has the wrong shape
    """
    try:
        if path.endswith(".npy"):
            return Logits.from_tensor(np.load(path))
        with open(path, "r") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise ConfigurationError(f"Could not load logits from {path}: {e}") from e

    if isinstance(data, dict):
        if "logits" not in data:
            raise ConfigurationError(
                "Logits file must contain a 'logits' field", details={"path": path}
            )
        return Logits.from_scores(data["logits"], token_ids=data.get("token_ids"))
    if isinstance(data, list):
        return Logits.from_scores(data)
    raise ConfigurationError(
        "Logits file must contain a list or an object", details={"path": path}
    )


def format_samplers() -> str:
    lines = []
    for metadata in SamplerFactory.available_samplers():
        lines.append(metadata.name)
        if metadata.description:
            lines.append(f"    {metadata.description}")
        for option in metadata.options:
            description = f": {option.description}" if option.description else ""
            lines.append(f"    - {option.key} ({option.option_type.value}){description}")
    return "\n".join(lines)


def format_result(logits: Logits) -> List[Dict[str, Any]]:
    if len(logits):
        logits.ensure_softmax()
    return [
        {"token_id": entry.token_id, "logit": entry.logit, "prob": entry.prob}
        for entry in logits
    ]


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point; returns the process exit status."""
    args = ArgumentParserSetup.parse_args(argv)

    if args.list_samplers:
        setup_logging(args.log_level or "WARNING", args.log_file)
        print(format_samplers())
        return 0

    config = {}
    try:
        if args.config:
            config = validate_config_file(args.config)
    except SamplerError as e:
        setup_logging(args.log_level or "WARNING", args.log_file)
        log_exception(e, logger)
        return 1

    # Command line flags take precedence over the configuration file
    setup_logging(
        args.log_level or config.get("log_level") or "WARNING",
        args.log_file or config.get("log_file"),
    )

    try:
        definitions = list(config.get("samplers", [])) + args.samplers
        chain = SamplerFactory.create_chain(definitions)
        logits = load_logits(args.logits)
        logger.info(f"Running {len(chain)} sampler(s) over {len(logits)} candidates")

        result = chain.sample(logits)
        print(json.dumps(format_result(result), indent=2))
        return 0
    except SamplerError as e:
        log_exception(e, logger)
        return 1


if __name__ == "__main__":
    sys.exit(main())
