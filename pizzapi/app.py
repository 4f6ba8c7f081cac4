#
# Flask application factory
#
# run:
# $ FLASK_APP=pizzapi.app:create_app flask run
# or
# $ python -m pizzapi [host]
# or, when installed
# $ pizzapi [host]
#
import sys
from flask import Flask
import pizzapi
from .api import PizzaAPI
from .config import get_config
from .dao import ResourceDAO
from .db import DB, with_connection
from .pizzas_dao import PizzasDAO
from .schema import load_openapi, load_resource_schemas
from .serializers import build_serializers
from . import models  # noqa: F401, registers the tables for create_all
from typing import Any, Dict, Mapping, Optional


def create_daos(schemas: Mapping, connect=with_connection) -> Dict[str, ResourceDAO]:
    """
    :param schemas: jsonapi type => ResourceSchema
    :param connect: returns a context manager that yields an Executor
    :return: jsonapi type => DAO
    """
    serializers = build_serializers(schemas)
    return {
        "dough": ResourceDAO(schemas["dough"], serializers["dough"], connect),
        "ingredient": ResourceDAO(schemas["ingredient"], serializers["ingredient"], connect),
        "pizza": PizzasDAO(schemas["pizza"], serializers["pizza"], connect, schemas["dough"], schemas["ingredient"]),
    }


def create_api(app: Flask, host: str = "localhost", port: Optional[int] = 5000, prefix: str = "/v1") -> PizzaAPI:
    """
    Expose the doughs, ingredients and pizzas
    """
    openapi = load_openapi()
    daos = create_daos(load_resource_schemas(openapi))
    api = PizzaAPI(app, host=host, port=port, prefix=prefix, openapi=openapi)
    api.expose(*daos.values())
    pizzapi.log.info(f"Starting API: http://{host}:{port}{prefix}")
    return api


def create_app(config: Optional[Mapping[str, Any]] = None) -> Flask:
    """
    :param config: configuration overrides, eg. {"SQLALCHEMY_DATABASE_URI": "sqlite://"}
    :return: Flask app serving the api
    """
    app = Flask("pizzapi")
    app.config.update(SQLALCHEMY_DATABASE_URI=get_config("SQLALCHEMY_DATABASE_URI"))
    # optional configuration file, eg. CONFIG_MODULE=/etc/pizzapi.cfg
    app.config.from_envvar("CONFIG_MODULE", silent=True)
    app.config.update(config or {})
    DB.init_app(app)

    with app.app_context():
        DB.create_all()
        create_api(app, host=get_config("API_HOST"), port=get_config("API_PORT"), prefix=get_config("API_PREFIX"))

    return app


def main(argv=None) -> None:
    """
    Run the development server, the host may be passed as the first argument
    """
    argv = sys.argv[1:] if argv is None else argv
    host = argv[0] if argv else get_config("API_HOST")
    port = int(get_config("API_PORT"))
    app = create_app({"API_HOST": host, "API_PORT": port})
    app.run(host=host, port=port)
