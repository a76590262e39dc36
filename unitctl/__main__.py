import logging
import os

from unitctl.cli import run_cli
from unitctl.config import setup_logger


def main() -> None:
    """The main entry point for the application.
    """
    level = logging.DEBUG if os.environ.get('UNITCTL_DEBUG') else logging.INFO
    setup_logger(level)

    run_cli()


if __name__ == '__main__':
    main()
