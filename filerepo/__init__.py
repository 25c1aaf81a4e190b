import logging

from flask import Flask
from .config import Config
from .extensions import cors, registry, runner


def create_app(config_class: type[Config] = Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    logging.getLogger(__name__).setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Extensions
    cors.init_app(app)
    registry.init_app(app)
    runner.init_app(app)

    # Blueprints
    from .routes.collections_api import bp as collections_api

    app.register_blueprint(collections_api, url_prefix="/api")

    return app
