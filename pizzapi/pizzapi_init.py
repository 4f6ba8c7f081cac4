import logging
import os
import sys
from flask_swagger_ui import get_swaggerui_blueprint
from flask import Flask
from .request import PizzaRequest
from .response import PizzaResponse
from .json_encoder import PizzaJSONEncoder
import flask.app


class PizzApp:
    """This class configures the Flask application to serve the pizza resources
    :param app: a Flask application.
    :param prefix: URL prefix where the api and swagger should be hosted. Default is '/v1'
    """

    # Configuration defaults are stored as class variables,
    # app.config and the environment take precedence (cfr. config.get_config)
    API_PREFIX = "/v1"
    API_HOST = "localhost"
    API_PORT = 5000
    SQLALCHEMY_DATABASE_URI = "sqlite:///pizzapi.sqlite"
    LOGLEVEL = logging.WARNING
    DOCS_PATH = "/docs"
    SWAGGER_PATH = "/swagger"

    def __init__(self, app: flask.app.Flask, *args, **kwargs) -> None:
        """
        Constructor
        """
        self.app = app
        if app is not None:
            self.init_app(app, *args, **kwargs)

    def init_app(
        self,
        app: flask.app.Flask,
        prefix: str = "",
        swaggerui_blueprint: bool = True,
    ) -> None:
        """
        Application initialization: request/response classes, logging and the swagger ui
        """
        if not isinstance(app, Flask):  # pragma: no cover
            raise TypeError("'app' should be Flask.")

        app.request_class = PizzaRequest
        app.response_class = PizzaResponse
        app.url_map.strict_slashes = False
        # flask-restful encodes the responses with json.dumps(**RESTFUL_JSON)
        app.config.setdefault("RESTFUL_JSON", {"cls": PizzaJSONEncoder})
        # flask-restful adds a "message" to 404 errors otherwise
        app.config.setdefault("ERROR_404_HELP", False)

        if app.config.get("DEBUG", False):
            log.setLevel(logging.DEBUG)

        if swaggerui_blueprint is True:
            docs_url = f"{prefix}{self.DOCS_PATH}"
            swaggerui_blueprint = get_swaggerui_blueprint(
                docs_url, f"{prefix}{self.SWAGGER_PATH}.json", config={"docExpansion": "none", "defaultModelsExpandDepth": -1}
            )
            app.register_blueprint(swaggerui_blueprint, url_prefix=docs_url)

    @staticmethod
    def init_logging(loglevel: int = logging.WARNING) -> logging.Logger:
        """
        Specify the log format used in the webserver logs
        The webserver will catch stderr so we redirect everything to sys.stderr
        """
        log = logging.getLogger(__name__)
        if log.level == logging.NOTSET:
            handler = logging.StreamHandler(sys.stderr)
            formatter = logging.Formatter("[%(asctime)s] %(levelname)s: %(message)s")
            handler.setFormatter(formatter)
            log.setLevel(loglevel)
            log.addHandler(handler)
        return log


#
# logging initialization
#
try:
    DEBUG = os.getenv("DEBUG", logging.WARNING)
    LOGLEVEL = int(DEBUG)
except ValueError:  # pragma: no cover
    print(f'Invalid LogLevel in DEBUG Environment Variable! "{DEBUG}"')
    LOGLEVEL = logging.INFO

log = PizzApp.init_logging(LOGLEVEL)
