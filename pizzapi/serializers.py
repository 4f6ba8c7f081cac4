"""
JSON:API document serialization of the raw resources returned by the DAOs

A raw resource is a flat dict like a database row, eg.

    {"id": 1, "name": "Margherita", "bakeTime": "90", "specialInstructions": None}

Raw pizzas may embed the raw "dough" and "ingredients" when these were included.
"""
from dataclasses import dataclass
from .links import api_base_url, params_link, resource_path_link
from .schema import ResourceSchema
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple


def coerce_integer(value: Any) -> Any:
    """
    Some drivers return NUMBER columns and out binds as strings
    """
    if value is None or isinstance(value, int):
        return value
    return int(float(value))


def transform_raw_resource(raw: Mapping, integer_fields: Sequence[str] = (), nullable_fields: Sequence[str] = ()) -> Dict[str, Any]:
    """
    :param raw: raw resource
    :param integer_fields: fields that are converted to int
    :param nullable_fields: fields where NULL is replaced by an empty string
    :return: transformed copy of `raw`
    """
    result = dict(raw)
    for name in integer_fields:
        if name in result:
            result[name] = coerce_integer(result[name])
    for name in nullable_fields:
        if name in result and result[name] is None:
            result[name] = ""
    return result


@dataclass(frozen=True)
class CompoundRelationship:
    """
    A relationship whose resources are serialized in the "included" member

    :param name: relationship name, eg. "ingredients"
    :param serializer: serializer of the related resources
    :param many: to-many relationship
    """

    name: str
    serializer: "ResourceSerializer"
    many: bool = False


class ResourceSerializer:
    """
    Serialize raw resources of a single type to jsonapi documents
    """

    def __init__(self, schema: ResourceSchema, relationships: Sequence[CompoundRelationship] = ()) -> None:
        self.schema = schema
        self.relationships = tuple(relationships)

    @property
    def resource_url(self) -> str:
        return resource_path_link(api_base_url(), self.schema.path)

    def transform(self, raw: Mapping) -> Dict[str, Any]:
        """
        Transform hook, applied to every raw resource before it is serialized
        """
        return transform_raw_resource(raw, self.schema.integer_fields, self.schema.nullable_fields)

    def resource_link(self, resource_id: Any) -> str:
        return resource_path_link(self.resource_url, resource_id)

    def resource_object(self, raw: Mapping) -> Dict[str, Any]:
        """
        :param raw: raw resource
        :return: jsonapi resource object
        """
        transformed = self.transform(raw)
        resource_id = str(transformed["id"])
        result = {
            "id": resource_id,
            "type": self.schema.type,
            "attributes": {name: transformed[name] for name in self.schema.attribute_names if name in transformed},
            "links": {"self": self.resource_link(resource_id)},
        }
        if self.relationships:
            result["relationships"] = {
                relationship.name: self.relationship_object(resource_id, relationship, raw) for relationship in self.relationships
            }
        return result

    def relationship_object(self, resource_id: str, relationship: CompoundRelationship, raw: Mapping) -> Dict[str, Any]:
        """
        The relationship "data" is only present when the relationship was included
        """
        instance_url = self.resource_link(resource_id)
        result = {
            "links": {
                "self": f"{instance_url}/relationships/{relationship.name}",
                "related": f"{instance_url}/{relationship.name}",
            }
        }
        if relationship.name not in raw:
            return result

        target_type = relationship.serializer.schema.type
        related = raw[relationship.name]
        if relationship.many:
            result["data"] = [{"type": target_type, "id": str(item["id"])} for item in related]
        elif related:
            result["data"] = {"type": target_type, "id": str(related["id"])}
        else:
            result["data"] = None
        return result

    def included_objects(self, raws: Sequence[Mapping]) -> List[Dict[str, Any]]:
        """
        :return: the resource objects of the included relationships, without duplicates
        """
        included = []
        seen = set()
        for raw in raws:
            for relationship in self.relationships:
                related = raw.get(relationship.name)
                if not related:
                    continue
                for item in related if relationship.many else [related]:
                    key = (relationship.serializer.schema.type, str(item["id"]))
                    if key in seen:
                        continue
                    seen.add(key)
                    included.append(relationship.serializer.resource_object(item))
        return included

    def _document(self, data: Any, raws: Sequence[Mapping], self_link: str) -> Dict[str, Any]:
        document = {"data": data, "links": {"self": self_link}, "jsonapi": {"version": "1.0"}}
        included = self.included_objects(raws)
        if included:
            document["included"] = included
        return document

    def serialize_resource(self, raw: Mapping, path: Optional[str] = None) -> Dict[str, Any]:
        """
        :param raw: raw resource
        :param path: path of the request, relative to the api root, eg. "pizzas/1"
        :return: jsonapi document
        """
        if path is None:
            path = f"{self.schema.path}/{raw['id']}"
        return self._document(self.resource_object(raw), [raw], resource_path_link(api_base_url(), path))

    def serialize_collection(self, raws: Sequence[Mapping], query: Optional[Mapping] = None) -> Dict[str, Any]:
        """
        :param raws: raw resources
        :param query: request query arguments, echoed in the self link
        :return: jsonapi document
        """
        data = [self.resource_object(raw) for raw in raws]
        return self._document(data, raws, params_link(self.resource_url, query))


def build_serializers(schemas: Mapping[str, ResourceSchema]) -> Dict[str, ResourceSerializer]:
    """
    :param schemas: jsonapi type => ResourceSchema
    :return: jsonapi type => ResourceSerializer
    """
    dough_serializer = ResourceSerializer(schemas["dough"])
    ingredient_serializer = ResourceSerializer(schemas["ingredient"])
    pizza_relationships: Tuple[CompoundRelationship, ...] = (
        CompoundRelationship("dough", dough_serializer),
        CompoundRelationship("ingredients", ingredient_serializer, many=True),
    )
    return {
        "dough": dough_serializer,
        "ingredient": ingredient_serializer,
        "pizza": ResourceSerializer(schemas["pizza"], pizza_relationships),
    }
