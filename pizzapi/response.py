# Response class
from flask import Response


class PizzaResponse(Response):
    """
    Response class, jsonapi documents are sent as "application/vnd.api+json"
    """

    default_mimetype = "application/vnd.api+json"
