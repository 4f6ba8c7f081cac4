# flask_restful_swagger2 API subclass
import copy
import json
import logging
from functools import wraps
from http import HTTPStatus
import werkzeug
from flask import request
from flask.app import Flask
from flask_restful import abort
from flask_restful.representations.json import output_json
from flask_restful.utils import OrderedDict
from flask_restful.utils import cors
from flask_restful_swagger_2 import Api as FRSApiBase
from flask_restful_swagger_2 import validate_path_item_object
from flask_restful_swagger_2 import extract_swagger_path, ValidationError as FRSValidationError
import pizzapi
from .config import get_config
from .dao import ResourceDAO
from .errors import GenericError, JsonapiError
from .jsonapi import CollectionResource, InstanceResource
from .schema import load_openapi
from typing import Any, Callable, Dict, Optional

DEFAULT_REPRESENTATIONS = [("application/vnd.api+json", output_json)]


class PizzaAPI(FRSApiBase):
    """
    Subclass of the flask_restful_swagger API class where we add the expose_dao method:
    this method creates the API endpoints for a resource DAO and documents them
    with the operations of the bundled swagger document
    """

    def __init__(
        self,
        app: Flask,
        host: str = "localhost",
        port: Optional[int] = 5000,
        prefix: str = "",
        description: str = "Pizza API",
        swaggerui_blueprint: bool = True,
        openapi: Optional[Dict[str, Any]] = None,
        **kwargs,
    ) -> None:
        """
        http://jsonapi.org/format/#content-negotiation-servers
        Servers MUST send all JSON:API data in response documents with
        the header Content-Type: application/vnd.api+json without any media type parameters.

        :param app: Flask app
        :param host: the host shown in the swagger ui
        :param port: the port shown in the swagger ui, may be None (eg. when proxied)
        :param prefix: url prefix of the api, eg. "/v1"
        :param openapi: swagger document with the documentation of the endpoints
        """
        self.openapi = openapi if openapi is not None else load_openapi()
        kwargs["default_mediatype"] = "application/vnd.api+json"
        pizzapi.PizzApp(app, prefix=prefix, swaggerui_blueprint=swaggerui_blueprint)
        if port:
            host = f"{host}:{port}"

        super().__init__(
            app,
            api_spec_url=kwargs.pop("api_spec_url", pizzapi.PizzApp.SWAGGER_PATH),
            host=host,
            title=self.openapi.get("info", {}).get("title", description),
            description=description,
            prefix=prefix,
            base_path=prefix,
            **kwargs,
        )
        self.representations = OrderedDict(DEFAULT_REPRESENTATIONS)
        self._swagger_object["definitions"].update(copy.deepcopy(self.openapi.get("definitions", {})))

    def expose_dao(self, dao: ResourceDAO) -> None:
        """
        Create the collection and instance endpoints of the resource handled by `dao`:

            /<path>              GET, POST
            /<path>/<typeId>     GET, PATCH

        :param dao: resource DAO
        """
        schema = dao.schema
        object_id = f"{schema.type}Id"
        properties = {"dao": dao, "object_id": object_id}

        url = f"/{schema.path}"
        endpoint = f"{schema.path}_collection"
        api_class = api_decorator(type(f"{schema.type}_API", (CollectionResource,), properties))
        pizzapi.log.info(f"Exposing {schema.path} on {url}, endpoint: {endpoint}")
        self.add_resource(api_class, url, endpoint=endpoint, methods=["GET", "POST"])

        url = f"/{schema.path}/<string:{object_id}>"
        endpoint = f"{schema.path}_instance"
        api_class = api_decorator(type(f"{schema.type}_API_i", (InstanceResource,), properties))
        pizzapi.log.info(f"Exposing {schema.type} instances on {url}, endpoint: {endpoint}")
        self.add_resource(api_class, url, endpoint=endpoint, methods=["GET", "PATCH"])

    def expose(self, *daos: ResourceDAO) -> None:
        """
        Expose multiple DAOs at once
        """
        for dao in daos:
            self.expose_dao(dao)

    def add_resource(self, resource, *urls, **kwargs):
        """
        This method is partly copied from flask_restful_swagger_2/__init__.py

        Changed because the operations are documented in the swagger document
        instead of the method docstrings
        """
        methods = [method.lower() for method in kwargs.get("methods", None) or getattr(resource, "methods", None) or []]
        for url in urls:
            if not url.startswith("/"):  # pragma: no cover
                raise GenericError("paths must start with a /")
            swagger_url = extract_swagger_path(url)
            operations = self.openapi.get("paths", {}).get(swagger_url, {})
            path_item = {method: copy.deepcopy(operation) for method, operation in operations.items() if method in methods}
            if not path_item:
                continue

            try:
                validate_path_item_object(path_item)
            except FRSValidationError as exc:  # pragma: no cover
                pizzapi.log.exception(exc)
                pizzapi.log.critical(f"Validation failed for {path_item}")
                continue

            self._swagger_object["paths"][swagger_url] = path_item
            # Check whether we manage to convert to json
            try:
                json.dumps(self._swagger_object)
            except (TypeError, ValueError):  # pragma: no cover
                pizzapi.log.critical("Json encoding failed")

        # pylint: disable=bad-super-call
        super(FRSApiBase, self).add_resource(resource, *urls, **kwargs)


def api_decorator(cls):
    """Decorator for the API views:
        - add cors
        - add generic exception handling

    :param cls: The class that will be decorated (e.g. CollectionResource, InstanceResource)
    :return: decorated class
    """
    cors_domain = get_config("cors_domain")
    for method_name in ["patch", "post", "delete", "get", "put", "options"]:
        method = getattr(cls, method_name, None)
        if not method:
            continue

        decorated_method = method
        # Add cors
        if cors_domain is not None:
            decorated_method = cors.crossdomain(origin=cors_domain)(decorated_method)
        # Add exception handling
        decorated_method = http_method_decorator(decorated_method)
        setattr(cls, method_name, decorated_method)
    return cls


def http_method_decorator(fun: Callable) -> Callable:
    """Decorator for the supported jsonapi HTTP methods (get, post, patch)
    - require the jsonapi content type for requests with a body
    - convert all exceptions to jsonapi errors

    This method will be called for all requests
    :param fun:
    :return: wrapped fun
    """

    @wraps(fun)
    def method_wrapper(*args, **kwargs):
        """Wrap the method and perform error handling
        :param *args:
        :param **kwargs:
        :return: result of the wrapped method
        """
        api_exception = None
        status_code = HTTPStatus.INTERNAL_SERVER_ERROR.value
        message = ""
        try:
            if not request.is_jsonapi and fun.__name__ not in ["get", "head", "options", "delete"]:
                # require jsonapi content type for requests to these routes
                raise GenericError(HTTPStatus.UNSUPPORTED_MEDIA_TYPE.description, HTTPStatus.UNSUPPORTED_MEDIA_TYPE.value)
            return fun(*args, **kwargs)

        except JsonapiError as exc:
            pizzapi.log.debug(f"{type(exc).__name__}: {exc}")
            api_exception = exc

        except werkzeug.exceptions.HTTPException as exc:
            status_code = exc.code
            message = exc.description
            pizzapi.log.error(message)

        except Exception as exc:  # pylint: disable=broad-except
            pizzapi.log.exception(exc)
            if pizzapi.log.getEffectiveLevel() > logging.DEBUG:
                message = "Logging Disabled"
            else:
                message = str(exc)

        status_code = getattr(api_exception, "status_code", status_code)
        title = getattr(api_exception, "message", message)
        detail = getattr(api_exception, "detail", title)

        errors = dict(status=str(status_code), title=title, detail=detail, code=str(status_code))
        abort(status_code, errors=[errors])

    return method_wrapper
