from werkzeug.datastructures import MultiDict

import pytest

from pizzapi.errors import ConflictError, ForbiddenError, MalformedBodyError, ValidationError
from pizzapi.jsonapi import is_canonical_id, is_valid_id, parse_filters, validate_attributes, validate_body, validate_relationships
from pizzapi.pizzas_dao import PizzasDAO

PIZZA_ATTRIBUTES = {"name": "Margherita", "bakeTime": 90, "ovenTemp": 900}


def _ingredients(*ids) -> dict:
    return {"ingredients": {"data": [{"type": "ingredient", "id": resource_id} for resource_id in ids]}}


def test_valid_post_body(schemas) -> None:
    body = {"data": {"type": "pizza", "attributes": PIZZA_ATTRIBUTES, "relationships": _ingredients("1", "2")}}
    validate_body(body, schemas["pizza"], PizzasDAO.relationships)


@pytest.mark.parametrize(
    "body, error",
    [
        ({}, MalformedBodyError),
        ({"data": []}, MalformedBodyError),
        ({"data": {"type": "pizza"}}, MalformedBodyError),
        ({"data": {"type": "dough", "attributes": PIZZA_ATTRIBUTES}}, ConflictError),
        ({"data": {"type": "pizza", "id": "1", "attributes": PIZZA_ATTRIBUTES}}, ForbiddenError),
    ],
)
def test_invalid_post_body(schemas, body: dict, error: type) -> None:
    with pytest.raises(error):
        validate_body(body, schemas["pizza"], PizzasDAO.relationships)


def test_patch_body(schemas) -> None:
    validate_body({"data": {"type": "pizza", "id": 1, "attributes": {}}}, schemas["pizza"], resource_id="1")
    with pytest.raises(MalformedBodyError):
        validate_body({"data": {"type": "pizza", "attributes": {}}}, schemas["pizza"], resource_id="1")
    with pytest.raises(ConflictError):
        validate_body({"data": {"type": "pizza", "id": "2", "attributes": {}}}, schemas["pizza"], resource_id="1")


@pytest.mark.parametrize(
    "attributes",
    [
        {"color": "red"},
        {"name": None},
        {"bakeTime": "90"},
        {"bakeTime": True},
        {"name": 3},
    ],
)
def test_invalid_attributes(schemas, attributes: dict) -> None:
    with pytest.raises(ValidationError):
        validate_attributes(attributes, schemas["pizza"])


def test_nullable_attribute(schemas) -> None:
    validate_attributes({"specialInstructions": None}, schemas["pizza"])


def test_required_attributes(schemas) -> None:
    validate_attributes({"name": "Margherita"}, schemas["pizza"])
    with pytest.raises(ValidationError) as exc_info:
        validate_attributes({"name": "Margherita"}, schemas["pizza"], creating=True)
    assert "bakeTime" in str(exc_info.value)


@pytest.mark.parametrize(
    "relationships",
    [
        "dough",
        {"toppings": {"data": []}},
        {"dough": {}},
        {"dough": {"data": [{"type": "dough", "id": "1"}]}},
        {"ingredients": {"data": {"type": "ingredient", "id": "1"}}},
        {"ingredients": {"data": [{"type": "dough", "id": "1"}]}},
        {"ingredients": {"data": [{"type": "ingredient"}]}},
        {"ingredients": {"data": [{"type": "ingredient", "id": {"a": 1}}]}},
        {"ingredients": {"data": [{"type": "ingredient", "id": ["1"]}]}},
        {"dough": {"data": {"type": "dough", "id": True}}},
        _ingredients("1", "1"),
    ],
)
def test_invalid_relationships(relationships) -> None:
    with pytest.raises(ValidationError):
        validate_relationships(relationships, PizzasDAO.relationships)


def test_valid_relationships() -> None:
    validate_relationships({"dough": {"data": None}, "ingredients": {"data": []}}, PizzasDAO.relationships)
    validate_relationships({"dough": {"data": {"type": "dough", "id": 3}}}, PizzasDAO.relationships)
    validate_relationships(None, PizzasDAO.relationships)


def test_parse_filters(schemas) -> None:
    args = MultiDict([("filter[waterTemp]", "90"), ("filter[name]", "Neapolitan"), ("abc", "def")])
    assert parse_filters(args, schemas["dough"]) == {"filter[waterTemp]": 90, "filter[name]": "Neapolitan", "abc": "def"}


def test_parse_invalid_filter(schemas) -> None:
    with pytest.raises(ValidationError):
        parse_filters(MultiDict([("filter[ovenTemp]", "hot")]), schemas["pizza"])


@pytest.mark.parametrize("value, expected", [("1", True), (1, True), ("abc", True), ("", False), (None, False), (True, False), ({"a": 1}, False), (["1"], False), (1.5, False)])
def test_is_valid_id(value, expected: bool) -> None:
    assert is_valid_id(value) is expected


@pytest.mark.parametrize("resource_id, expected", [("1", True), ("0", True), ("120", True), ("01", False), ("+1", False), ("1.0", False), ("abc", False), ("", False)])
def test_is_canonical_id(resource_id: str, expected: bool) -> None:
    assert is_canonical_id(resource_id) is expected
