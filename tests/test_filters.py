from types import SimpleNamespace

import pytest

from pizzapi.jsonapi_filters import GetFilterProcessor
from pizzapi.schema import DOUGH_COLUMNS


def _parameters(*names: str) -> list:
    return [SimpleNamespace(name=f"filter[{name}]") for name in names]


@pytest.fixture
def processor() -> GetFilterProcessor:
    return GetFilterProcessor(_parameters("waterTemp", "gramsWater", "proofTime", "name"), DOUGH_COLUMNS)


@pytest.mark.parametrize(
    "filter_name, expected",
    [
        ("filter[name]", "name"),
        ("filter[waterTemp]", "waterTemp"),
        ("filter", "filter"),
        ("filter[filter]", "filter"),
        ("name", "name"),
        ("filter[]", "filter[]"),
    ],
)
def test_normalize_filter_name(filter_name: str, expected: str) -> None:
    assert GetFilterProcessor.normalize_filter_name(filter_name) == expected


def test_normalize_filter_names_keeps_values() -> None:
    result = GetFilterProcessor.normalize_filter_names({"filter[name]": "Neapolitan", "abc": "def"})
    assert result == {"name": "Neapolitan", "abc": "def"}


def test_no_filters(processor: GetFilterProcessor) -> None:
    assert processor.process_get_filters({}) == {"bind_params": {}, "conditionals": ""}


def test_undeclared_filters_are_ignored(processor: GetFilterProcessor) -> None:
    assert processor.process_get_filters({"abc": "def", "filter[flourType]": "00"}) == {"bind_params": {}, "conditionals": ""}


def test_mixed_valid_and_invalid_filters(processor: GetFilterProcessor) -> None:
    result = processor.process_get_filters({"filter[waterTemp]": 90, "abc": "def"})
    assert result["conditionals"] == "WATER_TEMP = :waterTemp"
    assert result["bind_params"] == {"waterTemp": 90}


def test_conditionals_follow_the_declared_order(processor: GetFilterProcessor) -> None:
    filters = {
        "filter[name]": "Sample dough",
        "filter[proofTime]": 90,
        "filter[gramsWater]": 200,
        "filter[waterTemp]": 90,
    }
    result = processor.process_get_filters(filters)
    assert result["conditionals"] == "WATER_TEMP = :waterTemp AND GRAMS_WATER = :gramsWater AND PROOF_TIME = :proofTime AND NAME = :name"
    assert list(result["bind_params"]) == ["waterTemp", "gramsWater", "proofTime", "name"]
    assert result["bind_params"] == {"waterTemp": 90, "gramsWater": 200, "proofTime": 90, "name": "Sample dough"}


def test_swagger_parameter_dicts() -> None:
    processor = GetFilterProcessor([{"name": "filter[name]", "in": "query"}], {"name": "PIZZAS.NAME"})
    assert processor.process_get_filters({"filter[name]": "abc"}) == {"bind_params": {"name": "abc"}, "conditionals": "PIZZAS.NAME = :name"}


def test_declared_dough_filters(schemas) -> None:
    processor = GetFilterProcessor(schemas["dough"].filters, schemas["dough"].column_names)
    filters = {"filter[waterTemp]": 90, "filter[gramsWater]": 200, "filter[proofTime]": 90, "filter[name]": "Sample dough"}
    result = processor.process_get_filters(filters)
    assert result["conditionals"] == "NAME = :name AND GRAMS_WATER = :gramsWater AND PROOF_TIME = :proofTime AND WATER_TEMP = :waterTemp"
