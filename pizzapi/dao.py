"""
Data access objects: build the sql for the jsonapi operations, execute it and serialize the result

The DAOs return jsonapi documents, or None when the requested resource doesn't exist.
"""
# pylint: disable=logging-format-interpolation,line-too-long
import pizzapi
from .bind_params import BindParams, get_bind_params
from .db import Executor, with_connection
from .errors import InternalConsistencyError
from .jsonapi_filters import GetFilterProcessor
from .schema import ResourceSchema
from .serializers import ResourceSerializer
from .util import quote_alias, strip_whitespace
from typing import Any, Callable, ContextManager, Dict, Iterable, Mapping, Optional, Sequence, Tuple

Connect = Callable[[], ContextManager[Executor]]


def ids_exist(executor: Executor, table: str, ids: Iterable[Any]) -> bool:
    """
    :param executor: executor, possibly in a transaction
    :param table: table name, eg. "INGREDIENTS"
    :param ids: resource ids, duplicates are ignored
    :return: True when a row exists for every id in `ids`
    """
    unique_ids = list(dict.fromkeys(str(resource_id) for resource_id in ids))
    if not unique_ids:
        return True
    bind_params = {f"id{index}": resource_id for index, resource_id in enumerate(unique_ids)}
    placeholders = ", ".join(f":{name}" for name in bind_params)
    sql = f'SELECT COUNT(*) AS "count" FROM {table} WHERE ID IN ({placeholders})'
    result = executor.execute(sql, bind_params)
    return int(result.rows[0]["count"]) == len(unique_ids)


class ResourceDAO:
    """
    DAO for a resource without relationships (doughs, ingredients)
    """

    includable: Sequence[str] = ()
    # relationship name => (target type, to-many)
    relationships: Mapping[str, Tuple[str, bool]] = {}

    def __init__(self, schema: ResourceSchema, serializer: ResourceSerializer, connect: Connect = with_connection) -> None:
        """
        :param schema: schema of the resource
        :param serializer: serializer for the raw resources
        :param connect: returns a context manager that yields an Executor
        """
        self.schema = schema
        self.serializer = serializer
        self.connect = connect
        self.filter_processor = GetFilterProcessor(schema.filters, self.filter_columns())

    def filter_columns(self) -> Mapping[str, str]:
        return self.schema.column_names

    @property
    def select_columns(self) -> str:
        """
        :return: the columns aliased to the property names, eg. 'ID AS "id", NAME AS "name"'
        """
        return ", ".join(f"{self.schema.column_names[name]} AS {quote_alias(name)}" for name in self.schema.properties)

    def resource_path(self, resource_id: Any) -> str:
        return f"{self.schema.path}/{resource_id}"

    def get_collection(self, query: Optional[Mapping] = None, includes: Sequence[str] = ()) -> Dict[str, Any]:
        """
        :param query: request query arguments, the declared filters are applied
        :param includes: not used, there are no relationships
        :return: jsonapi document with the (filtered) resources
        """
        filters = self.filter_processor.process_get_filters(query or {})
        sql = f"SELECT {self.select_columns} FROM {self.schema.table}"
        if filters["conditionals"]:
            sql += f" WHERE {filters['conditionals']}"
        sql += " ORDER BY ID"

        with self.connect() as executor:
            result = executor.execute(strip_whitespace(sql), filters["bind_params"])
        return self.serializer.serialize_collection(result.rows, query)

    def get_by_id(self, resource_id: Any, includes: Sequence[str] = ()) -> Optional[Dict[str, Any]]:
        """
        :param resource_id: resource id
        :return: jsonapi document, or None if the resource doesn't exist
        """
        sql = f"SELECT {self.select_columns} FROM {self.schema.table} WHERE ID = :id"
        with self.connect() as executor:
            result = executor.execute(strip_whitespace(sql), {"id": resource_id})

        if not result.rows:
            return None
        if len(result.rows) > 1:
            raise InternalConsistencyError(f"Multiple {self.schema.type} rows found for id {resource_id}")
        return self.serializer.serialize_resource(result.rows[0], self.resource_path(resource_id))

    def insert(self, executor: Executor, bind_params: BindParams) -> Dict[str, Any]:
        """
        :return: the raw inserted resource, with the id assigned by the database
        """
        if bind_params:
            columns = ", ".join(self.schema.column_names[name] for name in bind_params)
            values = ", ".join(f":{name}" for name in bind_params)
            sql = f"INSERT INTO {self.schema.table} ({columns}) VALUES ({values}) RETURNING {self.select_columns}"
        else:
            sql = f"INSERT INTO {self.schema.table} DEFAULT VALUES RETURNING {self.select_columns}"

        raw = executor.execute(strip_whitespace(sql), bind_params).returned_resource()
        if raw is None:
            raise InternalConsistencyError(f"Insert into {self.schema.table} returned no {self.schema.type}")
        return raw

    def update(self, executor: Executor, resource_id: Any, bind_params: BindParams) -> Optional[Dict[str, Any]]:
        """
        :param bind_params: the new values and the "id" of the resource
        :return: the raw updated resource, or None if no resource with `resource_id` exists
        """
        assignments = ", ".join(f"{self.schema.column_names[name]} = :{name}" for name in bind_params if name != "id")
        sql = f"UPDATE {self.schema.table} SET {assignments} WHERE ID = :id RETURNING {self.select_columns}"
        result = executor.execute(strip_whitespace(sql), bind_params)
        if result.rows_affected == 0:
            return None

        raw = result.returned_resource()
        if raw is None or str(raw["id"]) != str(resource_id):
            raise InternalConsistencyError(f"Update of {self.schema.type} {resource_id} returned {raw}")
        return raw

    def post(self, body: Mapping) -> Dict[str, Any]:
        """
        :param body: validated jsonapi request body
        :return: jsonapi document with the created resource
        """
        bind_params = get_bind_params(body, self.schema.attribute_names)
        with self.connect() as executor:
            with executor.transaction():
                raw = self.insert(executor, bind_params)
        pizzapi.log.info(f"Created {self.schema.type} {raw['id']}")
        return self.serializer.serialize_resource(raw, self.resource_path(raw["id"]))

    def patch(self, resource_id: Any, body: Mapping) -> Optional[Dict[str, Any]]:
        """
        :param resource_id: id from the url
        :param body: validated jsonapi request body
        :return: jsonapi document with the updated resource, or None if the resource doesn't exist
        """
        if not body["data"].get("attributes"):
            return self.get_by_id(resource_id)

        bind_params = get_bind_params(body, self.schema.attribute_names, {"id": resource_id})
        with self.connect() as executor:
            with executor.transaction():
                raw = self.update(executor, resource_id, bind_params)
        if raw is None:
            return None
        return self.serializer.serialize_resource(raw, self.resource_path(resource_id))
