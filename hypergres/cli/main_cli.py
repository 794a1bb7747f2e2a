"""
Command line interface for discovering a database's Sources
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from ..config import Config
from ..core import Core
from ..errors import handle_error
from ..utils import setup_logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='hypergres',
        description='Discover tables and views of a PostgreSQL database and describe them as Sources'
    )
    subparsers = parser.add_subparsers(dest='command', required=True)

    discover = subparsers.add_parser('discover', help='Print the discovered Sources as JSON')
    discover.add_argument(
        '--schema',
        action='append',
        dest='schemas',
        metavar='NAME',
        help='Schema to discover (repeatable, defaults to HYPERGRES_SCHEMAS or public)'
    )
    discover.add_argument(
        '--strict-numbers',
        action='store_true',
        default=None,
        help='Describe numeric columns as plain JSON numbers'
    )
    discover.add_argument('--verbose', action='store_true', help='Log SQL statements')

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point; returns the process exit code"""
    args = build_parser().parse_args(argv)

    logger = setup_logger('hypergres', logging.DEBUG if args.verbose else logging.INFO)

    try:
        config = Config.from_env(schemas=args.schemas, strict_numbers=args.strict_numbers)
        core = Core()
        sources = core.configure(config)
    except Exception as e:
        return handle_error(e, logger)

    print(json.dumps([source.to_dict() for source in sources], indent=2, default=str))
    return 0


if __name__ == '__main__':
    sys.exit(main())
