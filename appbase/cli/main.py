"""
appbase command-line entry point.
"""

from __future__ import annotations

import sys
from typing import Optional

from appbase import __version__
from appbase.cli.application import Application
from appbase.cli.commands import secure

APPLICATION_NAME = "appbase"
APPLICATION_TITLE = "application base with secure data fields"
APPLICATION_BANNER = (
    "Manage at-rest encrypted secure data fields in YAML or JSON "
    "configuration files."
)


def create_application() -> Application:
    app = Application(APPLICATION_NAME, APPLICATION_TITLE, APPLICATION_BANNER, __version__)
    app.register_commands([
        secure.command,
    ])
    return app


def main(argv: Optional[list[str]] = None) -> int:
    return create_application().run(argv)


if __name__ == "__main__":
    sys.exit(main())
