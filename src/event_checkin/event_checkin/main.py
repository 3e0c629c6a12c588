from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv
from flask import Flask

from .attendance.controller import register as register_attendance
from .config import get_settings_module
from .container import Container, build_container
from .core import constants
from .core.logging import setup_logging

logger = logging.getLogger(__name__)


def create_app(*, container: Container | None = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    setup_logging(str(getattr(settings, "LOG_LEVEL", "INFO")))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["STREAM_QUEUE_SIZE"] = int(getattr(settings, "STREAM_QUEUE_SIZE", constants.DEFAULT_STREAM_QUEUE_SIZE))
    app.config["BROADCAST_SEND_TIMEOUT"] = float(
        getattr(settings, "BROADCAST_SEND_TIMEOUT", constants.DEFAULT_BROADCAST_SEND_TIMEOUT)
    )

    if container is None:
        container = build_container(settings=settings)
    app.extensions["event_checkin"] = container

    logger.info("Starting event check-in (settings=%s, members=%d)", settings_module, len(container.roster.all_names()))

    register_attendance(app, container)

    return app


def main() -> None:
    create_app().run(host="0.0.0.0", port=8080, threaded=True)


if __name__ == "__main__":
    main()
