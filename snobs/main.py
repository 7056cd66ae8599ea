#!/usr/bin/env python3
"""
Snobs relay entry point
"""

import argparse
import logging
import sys

from snobs import __version__
from snobs.config import DEFAULT_CONFIG_PATH, load_config
from snobs.server import create_app

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="snobs",
        description="Assign Stash group members as pull request reviewers over HTTP",
    )
    parser.add_argument('-c', '--config', default=DEFAULT_CONFIG_PATH,
                        help=f'use specified configuration file (default: {DEFAULT_CONFIG_PATH})')
    parser.add_argument('-v', '--verbose', action='store_true', help='Log debug messages')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser.parse_args(argv)


def main(argv=None):
    """Main entry point"""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        config = load_config(args.config)
    except (OSError, ValueError) as e:
        # ConfigError and tomllib.TOMLDecodeError are both ValueErrors
        logger.error(f"can't load config: {e}")
        sys.exit(1)

    logging.getLogger().setLevel(logging.DEBUG if args.verbose else config.log_level)

    host, port = config.bind_address
    app = create_app(config)

    logger.info(f"Listening on {host}:{port}, Stash at {config.stash}")
    app.run(host=host, port=port, threaded=True)


if __name__ == "__main__":
    main()
