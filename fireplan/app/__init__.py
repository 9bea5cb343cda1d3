"""Application factory and app-wide configuration."""

from typing import Optional

from flask import Flask
from flask_cors import CORS

from fireplan.app.api.routes import api_bp
from fireplan.config import AppSettings
from fireplan.logger import configure_logging, get_app_logger


def create_app(settings: Optional[AppSettings] = None) -> Flask:
    """Build the Flask app instance.

    Args:
        settings: Host settings; read from the environment when omitted.

    Returns:
        Flask: App with the ``api`` blueprint mounted under ``/api``.
    """
    settings = settings or AppSettings.from_env()
    configure_logging(settings.log_level)

    app = Flask(__name__)
    app.config["FIREPLAN"] = settings

    CORS(
        app,
        resources={r"/api/*": {"origins": list(settings.cors_origins)}},
        supports_credentials=True,
    )

    app.register_blueprint(api_bp, url_prefix="/api")
    get_app_logger(__name__).info(
        f"fireplan API ready (currency={settings.base_currency}, theme={settings.theme})"
    )
    return app
