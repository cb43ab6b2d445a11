"""CLI entry point."""

import os
import shlex
import sys
from typing import List, Optional

from common.logging_config import setup_logging
from cli.parser import ParseError, parse_command
from cli.repl import dispatch_command, repl_loop


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for CLI. With no command arguments, starts the interactive shell."""
    args = list(sys.argv[1:] if argv is None else argv)

    debug = '--debug' in args
    if debug:
        args.remove('--debug')

    log_level = 'DEBUG' if debug else os.getenv('LOG_LEVEL', 'WARNING')
    logger = setup_logging('cli', log_level=log_level)
    setup_logging('gridstore', log_level=log_level)

    if debug:
        logger.info("Debug logging enabled")

    if not args:
        repl_loop()
        return 0

    try:
        cmd_obj = parse_command(shlex.join(args))
    except ParseError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    try:
        result = dispatch_command(cmd_obj)
    except Exception as e:
        logger.error(f"CLI error: {e}", exc_info=True)
        raise

    print(result)
    return 1 if result.startswith("Error:") else 0


if __name__ == "__main__":
    sys.exit(main())
