"""TrioRelevan search front-end."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from dotenv import load_dotenv
from flask import Flask
from flask_cors import CORS
from markupsafe import Markup

from .configs import SettingsRepo
from .services import MockSearchBackend, SearchClient, format_text_with_lists

load_dotenv()


def _build_search_backend(settings: SettingsRepo):
    backend = str(settings.get("search", "backend", default="http")).lower()
    if backend == "mock":
        return MockSearchBackend()
    if backend != "http":
        raise RuntimeError(f"Unknown search backend: {backend!r}")
    return SearchClient(
        settings.get("search", "base_url"),
        timeout=float(settings.get("search", "timeout", default=10)),
    )


def _configure_logging(app: Flask, level_name: str) -> None:
    level = logging.getLevelName(str(level_name).upper())
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    app.logger.setLevel(level)
    logging.getLogger(__package__).setLevel(level)


def create_app(overrides: Optional[Mapping[str, Any]] = None) -> Flask:
    app = Flask(__name__)
    CORS(app)

    settings = SettingsRepo(overrides=overrides)
    _configure_logging(app, settings.get("logging", "level", default="INFO"))

    app.config["SETTINGS"] = settings
    app.extensions["search_backend"] = _build_search_backend(settings)

    @app.template_filter("format_text_with_lists")
    def _format_text_filter(text: Optional[str]) -> Markup:
        return Markup(format_text_with_lists(text))

    from .routes import api_bp, pages_bp

    app.register_blueprint(pages_bp)
    app.register_blueprint(api_bp, url_prefix="/api")

    app.logger.info("TrioRelevan ready (search backend: %s)", app.extensions["search_backend"].name)
    return app
