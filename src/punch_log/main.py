from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .config import get_settings_module
from .container import Container, build_container
from .web.controller import register as register_punch_api
from .web.runner import LoopRunner

logger = logging.getLogger(__name__)


def create_app(settings_module: Optional[str] = None, *, container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=str(getattr(settings, "LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("settings=%s backend=%s", settings_module, getattr(settings, "STORE_BACKEND", "file"))

    container = container or build_container(settings)
    runner = LoopRunner().start()
    summary = runner.run(container.coordinator.initialize())
    logger.info("punch log ready (state=%s, today=%s)", summary.state.value, summary.today)

    app.extensions["punch_log"] = {"container": container, "runner": runner}
    register_punch_api(app, container, runner)

    return app


if __name__ == "__main__":
    create_app().run()
