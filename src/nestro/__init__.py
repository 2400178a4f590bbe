"""Nestro - health calculators with name-only student profiles.

This package holds the web layer: the redirect guard for the legacy auth
routes, the magic-link callback, profile pages and the admin gate.
"""

import logging
import os
import subprocess
from logging.handlers import RotatingFileHandler
from pathlib import Path

__version__ = "0.1.0"


def get_git_commit() -> str:
    """Get the short git commit hash, or 'unknown' if not in a git repo."""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--short", "HEAD"],
            capture_output=True,
            text=True,
            check=True,
            timeout=5,
        )
        return result.stdout.strip()
    except (
        subprocess.CalledProcessError,
        FileNotFoundError,
        subprocess.TimeoutExpired,
    ):
        return "unknown"


def get_version_string() -> str:
    """Get version string with git commit for dev builds."""
    return f"{__version__}+{get_git_commit()}"


def _setup_logging(log_dir: Path) -> None:
    """Configure logging to both console and rotating file."""
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"nestro.{os.getpid()}.log"

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # File handler - detailed logging with rotation (10MB, keep 5 backups)
    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    logging.info("Logging configured. Log file: %s", log_file.absolute())


def main() -> None:
    """Entry point for the Nestro application."""
    from nicegui import app, ui

    from nestro.config import get_settings
    from nestro.routing import install_redirect_layers

    settings = get_settings()
    _setup_logging(settings.app.log_dir)

    install_redirect_layers(app, settings)

    import nestro.pages  # noqa: F401 - registers routes

    port = settings.app.port
    storage_secret = settings.app.storage_secret.get_secret_value()

    print(f"Nestro v{get_version_string()}")
    print(f"Starting application on http://0.0.0.0:{port}")

    reload = os.environ.get("NESTRO_RELOAD", "1") != "0"
    ui.run(
        host="0.0.0.0",  # nosec B104
        port=port,
        reload=reload,
        storage_secret=storage_secret,
        title="Nestro",
    )


if __name__ in {"__main__", "__mp_main__"}:
    main()
