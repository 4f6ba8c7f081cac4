import pytest

from pizzapi.dao import ResourceDAO, ids_exist
from pizzapi.db import DBResult
from pizzapi.errors import InternalConsistencyError, InvalidAttributeError

DOUGH_SELECT_COLUMNS = (
    'ID AS "id", NAME AS "name", GRAMS_FLOUR AS "gramsFlour", GRAMS_WATER AS "gramsWater", '
    'FLOUR_TYPE AS "flourType", WATER_TEMP AS "waterTemp", GRAMS_YEAST AS "gramsYeast", '
    'GRAMS_SALT AS "gramsSalt", GRAMS_SUGAR AS "gramsSugar", GRAMS_OLIVE_OIL AS "gramsOliveOil", '
    'BULK_FERMENT_TIME AS "bulkFermentTime", PROOF_TIME AS "proofTime", '
    'SPECIAL_INSTRUCTIONS AS "specialInstructions"'
)

RAW_DOUGH = {
    "id": 1,
    "name": "Neapolitan",
    "gramsFlour": 500,
    "gramsWater": 325,
    "flourType": "00",
    "waterTemp": 90,
    "gramsYeast": 2,
    "gramsSalt": 15,
    "gramsSugar": 0,
    "gramsOliveOil": 0,
    "bulkFermentTime": 120,
    "proofTime": 90,
    "specialInstructions": None,
}


@pytest.fixture
def dough_dao(schemas, serializers):
    def make(executor):
        return ResourceDAO(schemas["dough"], serializers["dough"], executor.connect)

    return make


def test_select_columns(schemas, serializers) -> None:
    assert ResourceDAO(schemas["dough"], serializers["dough"]).select_columns == DOUGH_SELECT_COLUMNS


def test_ingredient_type_column(schemas, serializers) -> None:
    dao = ResourceDAO(schemas["ingredient"], serializers["ingredient"])
    assert dao.select_columns == 'ID AS "id", TYPE AS "ingredientType", NAME AS "name", NOTES AS "notes"'


def test_get_collection_with_filter(dough_dao, make_executor) -> None:
    executor = make_executor([DBResult(rows=[RAW_DOUGH], rows_affected=1)])
    document = dough_dao(executor).get_collection({"filter[waterTemp]": 90, "abc": "def"})

    assert executor.calls == [(f"SELECT {DOUGH_SELECT_COLUMNS} FROM DOUGHS WHERE WATER_TEMP = :waterTemp ORDER BY ID", {"waterTemp": 90})]
    assert [item["id"] for item in document["data"]] == ["1"]
    assert executor.closed == 1


def test_get_collection_without_filters(dough_dao, make_executor) -> None:
    executor = make_executor()
    document = dough_dao(executor).get_collection()
    assert executor.calls == [(f"SELECT {DOUGH_SELECT_COLUMNS} FROM DOUGHS ORDER BY ID", {})]
    assert document["data"] == []


def test_get_by_id(dough_dao, make_executor) -> None:
    executor = make_executor([DBResult(rows=[RAW_DOUGH], rows_affected=1)])
    document = dough_dao(executor).get_by_id("1")
    assert executor.calls == [(f"SELECT {DOUGH_SELECT_COLUMNS} FROM DOUGHS WHERE ID = :id", {"id": "1"})]
    assert document["data"]["attributes"]["name"] == "Neapolitan"
    assert document["links"]["self"] == "/v1/doughs/1"


def test_get_missing_resource(dough_dao, make_executor) -> None:
    assert dough_dao(make_executor()).get_by_id("3") is None


def test_get_by_id_multiple_rows(dough_dao, make_executor) -> None:
    executor = make_executor([DBResult(rows=[RAW_DOUGH, RAW_DOUGH], rows_affected=2)])
    with pytest.raises(InternalConsistencyError):
        dough_dao(executor).get_by_id("1")


def test_post(dough_dao, make_executor) -> None:
    executor = make_executor([DBResult(rows=[RAW_DOUGH], rows_affected=1)])
    body = {"data": {"type": "dough", "attributes": {"name": "Neapolitan", "gramsFlour": 500}}}
    document = dough_dao(executor).post(body)

    sql, bind_params = executor.calls[0]
    assert sql == f"INSERT INTO DOUGHS (NAME, GRAMS_FLOUR) VALUES (:name, :gramsFlour) RETURNING {DOUGH_SELECT_COLUMNS}"
    assert bind_params == {"name": "Neapolitan", "gramsFlour": 500}
    assert executor.committed == 1
    assert document["data"]["id"] == "1"
    assert document["links"]["self"] == "/v1/doughs/1"


def test_post_without_returned_resource(dough_dao, make_executor) -> None:
    executor = make_executor()
    with pytest.raises(InternalConsistencyError):
        dough_dao(executor).post({"data": {"type": "dough", "attributes": {"name": "Neapolitan"}}})
    assert executor.rolled_back == 1


def test_post_invalid_attribute_never_connects(dough_dao, make_executor) -> None:
    executor = make_executor()
    with pytest.raises(InvalidAttributeError):
        dough_dao(executor).post({"data": {"type": "dough", "attributes": {"color": "red"}}})
    assert executor.connections == 0
    assert executor.calls == []


def test_patch(dough_dao, make_executor) -> None:
    executor = make_executor([DBResult(rows=[dict(RAW_DOUGH, name="Roman")], rows_affected=1)])
    body = {"data": {"type": "dough", "id": "1", "attributes": {"name": "Roman", "specialInstructions": None}}}
    document = dough_dao(executor).patch("1", body)

    sql, bind_params = executor.calls[0]
    assert sql == f"UPDATE DOUGHS SET NAME = :name, SPECIAL_INSTRUCTIONS = :specialInstructions WHERE ID = :id RETURNING {DOUGH_SELECT_COLUMNS}"
    assert bind_params == {"id": "1", "name": "Roman", "specialInstructions": None}
    assert executor.committed == 1
    assert document["data"]["attributes"]["name"] == "Roman"


def test_patch_without_attributes(dough_dao, make_executor) -> None:
    executor = make_executor([DBResult(rows=[RAW_DOUGH], rows_affected=1)])
    document = dough_dao(executor).patch("1", {"data": {"type": "dough", "id": "1", "attributes": {}}})
    assert executor.statements == [f"SELECT {DOUGH_SELECT_COLUMNS} FROM DOUGHS WHERE ID = :id"]
    assert executor.committed == 0
    assert document["data"]["id"] == "1"


def test_patch_missing_resource(dough_dao, make_executor) -> None:
    executor = make_executor([DBResult(rows_affected=0)])
    assert dough_dao(executor).patch("3", {"data": {"type": "dough", "id": "3", "attributes": {"name": "Roman"}}}) is None


def test_patch_returns_other_resource(dough_dao, make_executor) -> None:
    executor = make_executor([DBResult(rows=[dict(RAW_DOUGH, id=2)], rows_affected=1)])
    with pytest.raises(InternalConsistencyError):
        dough_dao(executor).patch("1", {"data": {"type": "dough", "id": "1", "attributes": {"name": "Roman"}}})
    assert executor.rolled_back == 1
    assert executor.closed == 1


def test_ids_exist(make_executor) -> None:
    executor = make_executor([DBResult(rows=[{"count": 2}], rows_affected=1)])
    assert ids_exist(executor, "INGREDIENTS", ["5", 8, "5"])
    assert executor.calls == [('SELECT COUNT(*) AS "count" FROM INGREDIENTS WHERE ID IN (:id0, :id1)', {"id0": "5", "id1": "8"})]


def test_ids_missing(make_executor) -> None:
    executor = make_executor([DBResult(rows=[{"count": 1}], rows_affected=1)])
    assert not ids_exist(executor, "INGREDIENTS", ["5", "8"])


def test_no_ids(make_executor) -> None:
    executor = make_executor()
    assert ids_exist(executor, "INGREDIENTS", [])
    assert executor.calls == []
