# Exception Handlers
#
# The application loglevel determines the level of detail shown to the user.
# If set to debug, too much sensitive info might be shown !
#
# The exceptions will be caught in http_method_decorator and formatted, for example:
# {
#      "status": "404",
#      "title": "Not Found: ",
#      "detail": "Not Found: No pizza with ID 3 found",
#      "code": "404"
# }
#
import traceback
from flask import has_request_context, request
import pizzapi
from sqlalchemy.exc import DontWrapMixin
from http import HTTPStatus
from .config import is_debug

HIDDEN_LOG = "(debug logging disabled)"


class JsonapiError(Exception, DontWrapMixin):
    status_code = HTTPStatus.INTERNAL_SERVER_ERROR.value
    message = ""


class NotFoundError(JsonapiError):
    """
    This exception is raised when a resource was not found
    """

    status_code = HTTPStatus.NOT_FOUND.value
    message = "Not Found: "

    def __init__(self, message="", status_code=HTTPStatus.NOT_FOUND.value, api_code=None):
        """
        :param message: Message to be returned in the (json) body
        :param status_code: HTTP Status code
        :param api_code: API code
        """
        Exception.__init__(self, message)
        self.status_code = status_code
        pizzapi.log.warning("Not found: %s", message)
        self.message += message


class ResourceRelationNotFoundError(JsonapiError):
    """
    A resource referenced in the relationships of a request doesn't exist
    """

    status_code = HTTPStatus.NOT_FOUND.value
    message = "Not Found: "

    def __init__(self, relation, *ids):
        """
        :param relation: name of the relationship, eg. "ingredients"
        :param ids: zero or more of the invalid ids
        """
        Exception.__init__(self, relation, *ids)
        self.relation = relation
        self.ids = ids
        pizzapi.log.warning("Invalid %s ids: %s", relation, ids)
        self.message += f"Request includes invalid {relation} ids"


class ForbiddenError(JsonapiError):
    """
    This exception is raised when the client requests an unsupported operation
    """

    status_code = HTTPStatus.FORBIDDEN.value
    message = "Forbidden: "

    def __init__(self, message="", status_code=HTTPStatus.FORBIDDEN.value, api_code=None):
        Exception.__init__(self, message)
        self.status_code = status_code
        pizzapi.log.warning("Forbidden: %s", message)
        self.message += message


class ConflictError(JsonapiError):
    """
    The request conflicts with the target resource, eg. the id in the body differs from the id in the url
    """

    status_code = HTTPStatus.CONFLICT.value
    message = "Conflict: "

    def __init__(self, message="", status_code=HTTPStatus.CONFLICT.value, api_code=None):
        Exception.__init__(self, message)
        self.status_code = status_code
        pizzapi.log.warning("Conflict: %s", message)
        self.message += message


class GenericError(JsonapiError):
    """
    This exception is raised when an error has been detected
    """

    status_code = HTTPStatus.INTERNAL_SERVER_ERROR.value  # 500
    message = "Generic Error: "

    def __init__(self, message, status_code=HTTPStatus.INTERNAL_SERVER_ERROR.value, api_code=None):
        Exception.__init__(self, message)
        self.status_code = status_code
        pizzapi.log.error("Generic Error: %s", message)
        if is_debug():
            if has_request_context():
                pizzapi.log.info(f"Error in {request.url}")
            pizzapi.log.debug(traceback.format_exc(120))
            self.message += str(message)
        else:
            self.message += HIDDEN_LOG


class InvalidAttributeError(GenericError):
    """
    An attribute that isn't part of the resource schema reached the persistence code.
    The request body has been validated by then, so this is a server error.
    """

    def __init__(self, attribute):
        self.attribute = attribute
        super().__init__(f"Invalid attribute {attribute} found")


class InternalConsistencyError(GenericError):
    """
    The database returned something that can't be right, eg. multiple rows for a primary key
    """


class ValidationError(JsonapiError):
    """
    This exception is raised when invalid input has been detected (client side input)
    Always send back the message to the client in the response
    """

    status_code = HTTPStatus.BAD_REQUEST.value
    message = "Validation Error: "

    def __init__(self, message="", status_code=HTTPStatus.BAD_REQUEST.value, api_code=None):
        Exception.__init__(self, message)
        self.status_code = status_code
        pizzapi.log.warning("ValidationError: %s", message)
        self.message += message


class MalformedBodyError(ValidationError):
    """
    The request body doesn't have the jsonapi document structure
    """

    message = "Malformed Body: "
