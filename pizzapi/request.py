"""
http://jsonapi.org/format/#content-negotiation-servers

Server Responsibilities
Servers MUST send all JSON API data in response documents with the header
"Content-Type: application/vnd.api+json" without any media type parameters.
"""

from flask import Request
import pizzapi
from .errors import MalformedBodyError


# pylint: disable=too-many-ancestors
class PizzaRequest(Request):
    """
    Parse the jsonapi-related request arguments:
    - header: Content-Type should be "application/vnd.api+json"
    - query args: include
    - body: valid json
    """

    jsonapi_content_types = ["application/json", "application/vnd.api+json"]
    is_jsonapi = False  # indicates whether this is a jsonapi request

    def __init__(self, *args, **kwargs):
        """
        constructor
        """
        super().__init__(*args, **kwargs)
        self.parse_content_type()
        self.parse_jsonapi_args()

    def parse_content_type(self):
        """
        Check if the request content type is jsonapi
        """
        if not isinstance(self.content_type, str):  # pragma: no cover
            return

        content_type = self.content_type.split(";")[0]
        if content_type not in self.jsonapi_content_types:
            return

        self.is_jsonapi = True

    def get_jsonapi_payload(self):
        """
        :return: jsonapi request payload
        """
        if not self.is_jsonapi:  # pragma: no cover
            pizzapi.log.warning(f'Invalid Media Type! "{self.content_type}"')
        result = self.get_json(silent=True)
        if not isinstance(result, dict):
            raise MalformedBodyError(f"Invalid JSON Payload : {result}")
        return result

    def parse_jsonapi_args(self):
        """
        parse the jsonapi request arguments:
        - include
        """
        self.includes = [inc for inc in self.args.get("include", "").split(",") if inc]
