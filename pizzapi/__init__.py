# flake8: noqa: F401
#
# PizzApp and log have to be imported first, the other modules use pizzapi.log and pizzapi.PizzApp
#
from .pizzapi_init import PizzApp, log
from .errors import (
    ConflictError,
    ForbiddenError,
    GenericError,
    InternalConsistencyError,
    InvalidAttributeError,
    MalformedBodyError,
    NotFoundError,
    ResourceRelationNotFoundError,
    ValidationError,
)
from .db import DB
from .api import PizzaAPI
from .dao import ResourceDAO
from .pizzas_dao import PizzasDAO
from .app import create_app
from .__about__ import __version__, __description__

__all__ = (
    "__version__",
    "__description__",
    "PizzApp",
    "PizzaAPI",
    "create_app",
    "log",
    # db:
    "DB",
    "ResourceDAO",
    "PizzasDAO",
    # Errors:
    "ConflictError",
    "ForbiddenError",
    "GenericError",
    "InternalConsistencyError",
    "InvalidAttributeError",
    "MalformedBodyError",
    "NotFoundError",
    "ResourceRelationNotFoundError",
    "ValidationError",
)
