"""
Flask application for the Query Designer API.
"""

import logging

from flask import Flask

from query_designer.api.query_package import bp_query_package
from query_designer.batch.utilities.helpers.env_helper import EnvHelper


def create_app() -> Flask:
    """Create the Flask app with the query package endpoints under ``/api``."""
    env_helper = EnvHelper()
    logging.basicConfig(
        level=env_helper.QUERY_DESIGNER_LOG_LEVEL,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )

    app = Flask(__name__)
    app.register_blueprint(bp_query_package, url_prefix="/api")
    return app


if __name__ == "__main__":
    create_app().run(host="127.0.0.1", port=5050)
