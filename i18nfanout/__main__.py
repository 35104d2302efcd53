"""진입점: python -m i18nfanout"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys


def main() -> None:
    """i18nfanout CLI 진입점. 설정을 로드하고 빌드를 실행한다."""
    parser = argparse.ArgumentParser(
        prog="i18nfanout",
        description="i18nfanout - Fork a site tree into one localised tree per locale",
    )
    parser.add_argument(
        "-c", "--config",
        default=None,
        help="Path to configuration YAML file (default: config/default.yaml)",
    )
    parser.add_argument("-s", "--source", default=None, help="Source directory")
    parser.add_argument("-d", "--destination", default=None, help="Destination directory")
    parser.add_argument(
        "-l", "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Override logging.level from the configuration",
    )
    args = parser.parse_args()

    from i18nfanout.app import SiteBuild
    from i18nfanout.errors import FanoutError
    from i18nfanout.utils.config import Config
    from i18nfanout.utils.logging_setup import setup_logging

    config = Config.load(args.config)
    setup_logging(config, level=args.log_level)
    logger = logging.getLogger("i18nfanout")

    try:
        build = SiteBuild(config, source=args.source, destination=args.destination)
        asyncio.run(build.run())
    except FanoutError as e:
        logger.error("Build failed: %s", e)
        sys.exit(1)
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
