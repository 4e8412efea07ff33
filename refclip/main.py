"""Application launcher.

Usage: ``refclip [project.json]``
"""

from __future__ import annotations

import logging
import sys
from typing import List, Optional

from PySide6.QtWidgets import QApplication

from .config import load_config
from .ui.main_window import MainWindow


def run(argv: Optional[List[str]] = None) -> int:
    argv = list(sys.argv if argv is None else argv)
    config = load_config()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    app = QApplication(argv)
    window = MainWindow(config=config)
    if len(argv) > 1:
        window.openProjectPath(argv[1])
    window.show()
    window.centerOnPreferredScreen()
    return app.exec()


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
