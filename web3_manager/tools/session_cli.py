"""Run a simulated wallet session and print its summary as JSON."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Optional, Sequence

from web3_manager.core.main import parse_args, run

LOGGER = logging.getLogger("web3_manager.cli.session")


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, str(args.log_level).upper(), logging.WARNING))
    LOGGER.debug("Running simulated session with %s", vars(args))

    summary = asyncio.run(run(args))
    print(json.dumps(summary, indent=2, sort_keys=True))


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    main()
