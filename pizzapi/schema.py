"""
Resource schemas, read from the bundled swagger document (openapi.yaml)

The swagger "definitions" declare the attributes of the resources,
the GET parameters of the collection paths declare the filters.
The schemas are built once at startup and passed to the DAOs and serializers.
"""
import os
from dataclasses import dataclass
from types import MappingProxyType
import yaml
import pizzapi
from typing import Any, Dict, Mapping, Optional, Tuple

OPENAPI_FILE = os.path.join(os.path.dirname(__file__), "openapi.yaml")

# attribute name => database column
DOUGH_COLUMNS = {
    "id": "ID",
    "name": "NAME",
    "gramsFlour": "GRAMS_FLOUR",
    "gramsWater": "GRAMS_WATER",
    "flourType": "FLOUR_TYPE",
    "waterTemp": "WATER_TEMP",
    "gramsYeast": "GRAMS_YEAST",
    "gramsSalt": "GRAMS_SALT",
    "gramsSugar": "GRAMS_SUGAR",
    "gramsOliveOil": "GRAMS_OLIVE_OIL",
    "bulkFermentTime": "BULK_FERMENT_TIME",
    "proofTime": "PROOF_TIME",
    "specialInstructions": "SPECIAL_INSTRUCTIONS",
}

INGREDIENT_COLUMNS = {
    "id": "ID",
    "ingredientType": "TYPE",
    "name": "NAME",
    "notes": "NOTES",
}

PIZZA_COLUMNS = {
    "id": "ID",
    "doughId": "DOUGH_ID",
    "name": "NAME",
    "bakeTime": "BAKE_TIME",
    "ovenTemp": "OVEN_TEMP",
    "specialInstructions": "SPECIAL_INSTRUCTIONS",
}

# type => (collection path, table, row prefix, swagger definition, column names)
RESOURCES = {
    "dough": ("doughs", "DOUGHS", "DOUGH", "DoughAttributes", DOUGH_COLUMNS),
    "ingredient": ("ingredients", "INGREDIENTS", "INGREDIENT", "IngredientAttributes", INGREDIENT_COLUMNS),
    "pizza": ("pizzas", "PIZZAS", "PIZZA", "PizzaAttributes", PIZZA_COLUMNS),
}


@dataclass(frozen=True)
class AttributeSchema:
    name: str
    type: str = "string"
    nullable: bool = False


@dataclass(frozen=True)
class FilterSchema:
    """
    A declared GET filter, `name` is the query argument, eg. "filter[name]"
    """

    name: str
    type: str = "string"


@dataclass(frozen=True)
class ResourceSchema:
    """
    Immutable description of a resource type

    :param type: jsonapi type, eg. "dough"
    :param path: collection path, eg. "doughs"
    :param table: database table, eg. "DOUGHS"
    :param prefix: column alias prefix used in join queries, eg. "DOUGH"
    :param column_names: attribute name => database column
    :param attributes: the attributes, in declaration order (without "id")
    :param filters: the declared GET filters, in declaration order
    :param required: the attributes that must be present when a resource is created
    """

    type: str
    path: str
    table: str
    prefix: str
    column_names: Mapping[str, str]
    attributes: Tuple[AttributeSchema, ...] = ()
    filters: Tuple[FilterSchema, ...] = ()
    required: Tuple[str, ...] = ()

    @property
    def attribute_names(self) -> Tuple[str, ...]:
        return tuple(attribute.name for attribute in self.attributes)

    @property
    def properties(self) -> Tuple[str, ...]:
        """
        :return: the fields of a raw resource: "id" followed by the attribute names
        """
        return ("id",) + self.attribute_names

    @property
    def integer_fields(self) -> Tuple[str, ...]:
        return tuple(attribute.name for attribute in self.attributes if attribute.type in ("integer", "number"))

    @property
    def nullable_fields(self) -> Tuple[str, ...]:
        return tuple(attribute.name for attribute in self.attributes if attribute.nullable)


def load_openapi(filename: str = OPENAPI_FILE) -> Dict[str, Any]:
    """
    :param filename: swagger yaml file
    :return: the parsed swagger document
    """
    with open(filename) as openapi_file:
        return yaml.safe_load(openapi_file)


def load_resource_schemas(document: Optional[Mapping] = None) -> Dict[str, ResourceSchema]:
    """
    Build the resource schemas from the swagger document

    :param document: parsed swagger document, the bundled openapi.yaml is read when omitted
    :return: dict of jsonapi type => ResourceSchema
    """
    if document is None:
        document = load_openapi()

    schemas = {}
    for resource_type, (path, table, prefix, definition_name, column_names) in RESOURCES.items():
        definition = document["definitions"][definition_name]
        attributes = tuple(
            AttributeSchema(name, prop.get("type", "string"), bool(prop.get("x-nullable", False)))
            for name, prop in definition.get("properties", {}).items()
        )
        get_parameters = document["paths"][f"/{path}"]["get"].get("parameters", [])
        filters = tuple(
            FilterSchema(param["name"], param.get("type", "string"))
            for param in get_parameters
            if param.get("in") == "query" and param["name"].startswith("filter[")
        )
        schemas[resource_type] = ResourceSchema(
            type=resource_type,
            path=path,
            table=table,
            prefix=prefix,
            column_names=MappingProxyType(dict(column_names)),
            attributes=attributes,
            filters=filters,
            required=tuple(definition.get("required", [])),
        )
        pizzapi.log.debug(f"Loaded {resource_type} schema: {schemas[resource_type].attribute_names}")

    return schemas
