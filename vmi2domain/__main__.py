# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
from __future__ import annotations

import logging
import sys
import traceback
from typing import Optional, Sequence

from .cli.commands import run
from .cli.parser import parse_args_with_config
from .core.exceptions import Vmi2DomainError, format_exception_for_cli


def _print_stderr(msg: str) -> None:
    print(msg, file=sys.stderr)


def main(argv: Optional[Sequence[str]] = None) -> None:
    logger: Optional[logging.Logger] = None

    # Phase 1: parse (config errors can happen here)
    try:
        args, conf, logger = parse_args_with_config(argv)
    except Vmi2DomainError as e:
        _print_stderr(f"💥 ERROR    {e}")
        raise SystemExit(e.code)
    except OSError as e:
        # e.g. --log-file under an unwritable directory
        _print_stderr(f"💥 ERROR    {format_exception_for_cli(e, verbose=2)}")
        raise SystemExit(1)
    except KeyboardInterrupt:
        _print_stderr("Interrupted by user (Ctrl+C).")
        raise SystemExit(130)

    # Phase 2: convert
    try:
        rc = run(args, conf, logger)
    except Vmi2DomainError as e:
        logger.error("%s", format_exception_for_cli(e, verbose=args.verbose))
        rc = e.code
    except OSError as e:
        logger.error("%s", format_exception_for_cli(e, verbose=2))
        rc = 1
    except KeyboardInterrupt:
        logger.warning("Interrupted by user (Ctrl+C).")
        rc = 130
    except Exception as e:
        # Unexpected exceptions must not fail silently.
        logger.error("💥 UNHANDLED %s: %s", type(e).__name__, e)
        logger.debug("%s", traceback.format_exc())
        rc = 1

    raise SystemExit(rc)


if __name__ == "__main__":
    main()
