#  This file contains the jsonapi-related flask-restful "Resource" objects:
#  - CollectionResource for the exposed collections (GET, POST)
#  - InstanceResource for the exposed instances (GET, PATCH)
#
#  The http methods validate the request, the DAO of the resource does the work.
#
# pylint: disable=redefined-builtin,invalid-name,line-too-long,no-member,logging-format-interpolation
#
import re
from flask import request
from flask_restful_swagger_2 import Resource as FRSResource
from http import HTTPStatus
import pizzapi
from .errors import ConflictError, ForbiddenError, MalformedBodyError, NotFoundError, ValidationError
from .schema import ResourceSchema
from typing import Any, Dict, List, Mapping, Optional

JSON_TYPES = {"string": (str,), "integer": (int,), "number": (int, float)}
# ids as the database returns them, the ID column would also match "01" with row 1
CANONICAL_ID_RE = re.compile(r"0|[1-9][0-9]*")


def is_valid_id(value: Any) -> bool:
    """
    :param value: the "id" of a resource identifier in a request body
    :return: whether `value` can be bound as an id
    """
    if isinstance(value, bool):
        return False
    return isinstance(value, int) or (isinstance(value, str) and value != "")


def is_canonical_id(resource_id: str) -> bool:
    return CANONICAL_ID_RE.fullmatch(resource_id) is not None


def validate_attributes(attributes: Mapping, schema: ResourceSchema, creating: bool = False) -> None:
    """
    :param attributes: the "data.attributes" of a request body
    :param schema: resource schema
    :param creating: True for POST requests, then the required attributes must be present
    """
    declared = {attribute.name: attribute for attribute in schema.attributes}
    for name, value in attributes.items():
        if name not in declared:
            raise ValidationError(f"Attribute {name} is invalid")
        if value is None:
            if not declared[name].nullable:
                raise ValidationError(f"Attribute {name} can't be null")
            continue
        expected = JSON_TYPES.get(declared[name].type, (object,))
        if isinstance(value, bool) or not isinstance(value, expected):
            raise ValidationError(f"Attribute {name} should be of type {declared[name].type}")

    if creating:
        missing = [name for name in schema.required if name not in attributes]
        if missing:
            raise ValidationError(f"Missing required attributes: {', '.join(missing)}")


def validate_relationships(relationships: Any, declared: Mapping) -> None:
    """
    Validate the "data.relationships" of a request body

    :param relationships: the relationships from the body
    :param declared: relationship name => (target type, to-many)
    """
    if relationships is None:
        return
    if not isinstance(relationships, dict):
        raise ValidationError("Invalid relationships")

    for name, relationship in relationships.items():
        if name not in declared:
            raise ValidationError(f"Invalid relationship {name}")
        if not isinstance(relationship, dict) or "data" not in relationship:
            raise ValidationError(f"Relationship {name} contains no data")

        target_type, many = declared[name]
        data = relationship["data"]
        if many and not isinstance(data, list):
            raise ValidationError(f"Relationship {name} data should be a list")
        if not many and isinstance(data, list):
            raise ValidationError(f"Relationship {name} data should be a single resource identifier")
        if data is None:
            continue

        items = data if many else [data]
        for item in items:
            if not isinstance(item, dict) or item.get("type") != target_type or not is_valid_id(item.get("id")):
                raise ValidationError(f"Invalid {name} resource identifier {item}")

        identifiers = {(item["type"], str(item["id"])) for item in items}
        if len(identifiers) != len(items):
            raise ValidationError(f"Relationship {name} contains non-unique elements")


def validate_body(payload: Mapping, schema: ResourceSchema, relationships: Optional[Mapping] = None, resource_id: Any = None) -> None:
    """
    Validate the body of a POST (resource_id is None) or PATCH request

    :param payload: the request body
    :param schema: schema of the resource
    :param relationships: the relationships that may be set in the request
    :param resource_id: the id from the url, for PATCH requests
    """
    data = payload.get("data")
    if not isinstance(data, dict):
        raise MalformedBodyError('Body does not include required "data" value')
    if not isinstance(data.get("attributes"), dict):
        raise MalformedBodyError('Body does not include required "data.attributes" value')

    if data.get("type") != schema.type:
        raise ConflictError(f"Invalid type {data.get('type')}, expected {schema.type}")

    if resource_id is None:
        if data.get("id") is not None:
            raise ForbiddenError("Client generated ids are not supported")
    elif "id" not in data:
        raise MalformedBodyError('Body does not include required "data.id" value')
    elif str(data["id"]) != str(resource_id):
        raise ConflictError(f"The id in the body ({data['id']}) doesn't match the id in the url ({resource_id})")

    validate_attributes(data["attributes"], schema, creating=resource_id is None)
    validate_relationships(data.get("relationships"), relationships or {})


def parse_filters(args: Mapping, schema: ResourceSchema) -> Dict[str, Any]:
    """
    :param args: request query arguments
    :param schema: resource schema, the filter values are converted to the declared filter type
    :return: the query arguments with the converted filter values
    """
    result = {name: args.get(name) for name in args}
    for filter_schema in schema.filters:
        if filter_schema.name not in result or filter_schema.type not in ("integer", "number"):
            continue
        value = result[filter_schema.name]
        try:
            result[filter_schema.name] = int(value) if filter_schema.type == "integer" else float(value)
        except (TypeError, ValueError) as exc:
            raise ValidationError(f"Invalid value {value} for {filter_schema.name}") from exc
    return result


def parse_includes(includable) -> List[str]:
    """
    :param includable: the relationships that can be included
    :return: the relationships requested with the "include" query argument
    """
    for include in request.includes:
        if include not in includable:
            raise ValidationError(f"Invalid include {include}")
    return list(dict.fromkeys(request.includes))


class Resource(FRSResource):
    """
    Superclass for the exposed endpoints
    """

    # dao: the DAO that handles the requests, set by PizzaAPI.expose_dao
    dao = None
    # object_id: the url parameter holding the id of the instance, eg. "pizzaId"
    object_id = "id"

    @property
    def schema(self) -> ResourceSchema:
        return self.dao.schema


class CollectionResource(Resource):
    def get(self, **kwargs):
        """
        Retrieve a collection, filtered by the filter[] query arguments
        """
        includes = parse_includes(self.dao.includable)
        query = parse_filters(request.args, self.schema)
        return self.dao.get_collection(query, includes)

    def post(self, **kwargs):
        """
        http://jsonapi.org/format/#crud-creating
        The request MUST include a single resource object as primary data.
        403: This implementation does not accept client-generated IDs
        201: Created, with a Location header identifying the new resource
        """
        payload = request.get_jsonapi_payload()
        validate_body(payload, self.schema, self.dao.relationships)
        result = self.dao.post(payload)
        location = result["data"]["links"]["self"]
        pizzapi.log.debug(f"Created {location}")
        return result, HTTPStatus.CREATED.value, {"Location": location}


class InstanceResource(Resource):
    def resource_id(self, kwargs: Mapping) -> str:
        """
        :return: the id from the url, a 404 is raised for ids that can't be stored in the ID column
        """
        resource_id = kwargs[self.object_id]
        if not is_canonical_id(resource_id):
            raise NotFoundError(f"No {self.schema.type} with ID {resource_id} found")
        return resource_id

    def get(self, **kwargs):
        """
        Retrieve a single instance
        """
        resource_id = self.resource_id(kwargs)
        includes = parse_includes(self.dao.includable)
        result = self.dao.get_by_id(resource_id, includes)
        if result is None:
            raise NotFoundError(f"No {self.schema.type} with ID {resource_id} found")
        return result

    def patch(self, **kwargs):
        """
        http://jsonapi.org/format/#crud-updating
        Attributes missing from the request are left unchanged,
        a to-many relationship in the request replaces the existing relationship
        """
        resource_id = self.resource_id(kwargs)
        payload = request.get_jsonapi_payload()
        validate_body(payload, self.schema, self.dao.relationships, resource_id)
        result = self.dao.patch(resource_id, payload)
        if result is None:
            raise NotFoundError(f"No {self.schema.type} with ID {resource_id} found")
        return result
