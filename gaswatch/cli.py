"""Command-line interface for Gas Watch."""

import sys
import json
import logging
import argparse
from .config import Config
from .runner import GasTrackerRunner
from .logging import setup_logging, get_logger
from .view import View

logger = get_logger(__name__)


def main():
    """Main CLI entrypoint."""
    parser = argparse.ArgumentParser(
        description="Poll the Etherscan gas oracle and keep 1 hour and 24 hour "
                    "gas price trend windows."
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to config.yaml (default: search for config.yaml)"
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Poll once, print the result as JSON and exit (cron-friendly)"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Verbose output (for --once mode)"
    )
    parser.add_argument(
        "--view",
        choices=[v.value for v in View],
        default=View.SHORT.value,
        help="Trend window included in --once output (default: 1hour)"
    )

    args = parser.parse_args()

    try:
        config = Config(args.config)
    except FileNotFoundError as e:
        logging.basicConfig(level=logging.ERROR, format='[%(levelname)s] %(message)s')
        logger.error(f"Config file not found: {e}")
        sys.exit(1)
    except Exception as e:
        logging.basicConfig(level=logging.ERROR, format='[%(levelname)s] %(message)s')
        logger.error(f"Error loading config: {e}")
        sys.exit(1)

    setup_logging(config)

    runner = GasTrackerRunner(config, initial_view=View(args.view))

    if args.once:
        try:
            result = runner.poll_once()
            output = {
                "tick": result,
                "view": runner.view.snapshot().to_dict(),
            }
            if args.verbose:
                print(json.dumps(output, indent=2))
            else:
                print(json.dumps(output))
            logger.debug(f"One-shot run completed: {json.dumps(output)}")
        except Exception as e:
            logger.error(f"Error in one-shot run: {e}", exc_info=True)
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        finally:
            runner.client.close()

        if result["error"]:
            sys.exit(1)
    else:
        runner.run_continuous()


if __name__ == "__main__":
    main()
