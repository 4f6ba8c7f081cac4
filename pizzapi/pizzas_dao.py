"""
Pizzas DAO

Pizzas have a to-one "dough" relationship (PIZZAS.DOUGH_ID) and a to-many "ingredients"
relationship (PIZZA_INGREDIENTS). Included relationships are LEFT JOINed, the flat rows
are grouped into nested raw pizzas by the JoinRowGrouper.
"""
# pylint: disable=logging-format-interpolation,line-too-long
from sqlalchemy.exc import IntegrityError
import pizzapi
from .bind_params import BindParams, get_bind_params
from .dao import Connect, ResourceDAO, ids_exist
from .db import Executor, is_foreign_key_violation
from .errors import InternalConsistencyError, ResourceRelationNotFoundError
from .rows import JoinRowGrouper, Relation
from .schema import ResourceSchema
from .serializers import ResourceSerializer
from .util import quote_alias, strip_whitespace
from typing import Any, Dict, List, Mapping, Optional, Sequence

INSERT_PIZZA_INGREDIENT = "INSERT INTO PIZZA_INGREDIENTS (PIZZA_ID, INGREDIENT_ID) VALUES (:pizzaId, :ingredientId)"
DELETE_PIZZA_INGREDIENTS = "DELETE FROM PIZZA_INGREDIENTS WHERE PIZZA_ID = :pizzaId"


def prefixed_columns(schema: ResourceSchema) -> List[str]:
    """
    :return: the qualified columns of `schema` aliased like PREFIX_attributeName,
             eg. 'DOUGHS.NAME AS "DOUGH_name"'
    """
    return [
        f"{schema.table}.{schema.column_names[name]} AS {quote_alias(f'{schema.prefix}_{name}')}" for name in schema.properties
    ]


def relationship_data(relationships: Mapping, name: str) -> Any:
    return (relationships.get(name) or {}).get("data")


class PizzasDAO(ResourceDAO):
    includable = ("dough", "ingredients")
    relationships = {"dough": ("dough", False), "ingredients": ("ingredient", True)}

    def __init__(
        self,
        schema: ResourceSchema,
        serializer: ResourceSerializer,
        connect: Connect,
        dough_schema: ResourceSchema,
        ingredient_schema: ResourceSchema,
    ) -> None:
        super().__init__(schema, serializer, connect)
        self.dough_schema = dough_schema
        self.ingredient_schema = ingredient_schema
        self.grouper = JoinRowGrouper(
            schema.prefix,
            schema.properties,
            (
                Relation("dough", dough_schema.prefix, dough_schema.properties),
                Relation("ingredients", ingredient_schema.prefix, ingredient_schema.properties, many=True),
            ),
        )

    def filter_columns(self) -> Mapping[str, str]:
        # qualified, the joined tables have columns with the same names
        return {name: f"{self.schema.table}.{column}" for name, column in self.schema.column_names.items()}

    def select_query(self, conditionals: str = "", includes: Sequence[str] = ()) -> str:
        """
        :param conditionals: sql conditionals for the WHERE clause
        :param includes: included relationships, "dough" and/or "ingredients"
        :return: sql query returning the rows for the JoinRowGrouper
        """
        columns = prefixed_columns(self.schema)
        joins = []
        order_by = ["PIZZAS.ID"]
        if "dough" in includes:
            columns += prefixed_columns(self.dough_schema)
            joins.append("LEFT JOIN DOUGHS ON PIZZAS.DOUGH_ID = DOUGHS.ID")
        if "ingredients" in includes:
            columns += prefixed_columns(self.ingredient_schema)
            joins.append(
                """LEFT JOIN PIZZA_INGREDIENTS ON PIZZAS.ID = PIZZA_INGREDIENTS.PIZZA_ID
                   LEFT JOIN INGREDIENTS ON INGREDIENTS.ID = PIZZA_INGREDIENTS.INGREDIENT_ID"""
            )
            order_by.append("INGREDIENTS.ID")

        sql = f"""SELECT {", ".join(columns)}
                  FROM PIZZAS
                  {" ".join(joins)}"""
        if conditionals:
            sql += f" WHERE {conditionals}"
        sql += f" ORDER BY {', '.join(order_by)}"
        return strip_whitespace(sql)

    def get_collection(self, query: Optional[Mapping] = None, includes: Sequence[str] = ()) -> Dict[str, Any]:
        """
        :param query: request query arguments, the declared filters are applied
        :param includes: relationships to include
        :return: jsonapi document with the (filtered) pizzas
        """
        filters = self.filter_processor.process_get_filters(query or {})
        sql = self.select_query(filters["conditionals"], includes)
        with self.connect() as executor:
            result = executor.execute(sql, filters["bind_params"])
        raw_pizzas = self.grouper.normalize_join_rows(result.rows)
        return self.serializer.serialize_collection(raw_pizzas, query)

    def get_by_id(self, pizza_id: Any, includes: Sequence[str] = ()) -> Optional[Dict[str, Any]]:
        """
        :param pizza_id: pizza id
        :param includes: relationships to include
        :return: jsonapi document, or None if the pizza doesn't exist
        """
        sql = self.select_query("PIZZAS.ID = :id", includes)
        with self.connect() as executor:
            result = executor.execute(sql, {"id": pizza_id})

        raw_pizzas = self.grouper.normalize_join_rows(result.rows)
        if not raw_pizzas:
            return None
        if len(raw_pizzas) > 1:
            raise InternalConsistencyError(f"Multiple pizzas found for id {pizza_id}")
        return self.serializer.serialize_resource(raw_pizzas[0], self.resource_path(pizza_id))

    @staticmethod
    def dough_bind_params(relationships: Mapping, base_value: BindParams) -> BindParams:
        """
        The dough relationship is stored in the DOUGH_ID column of the pizza
        """
        if "dough" in relationships:
            dough = relationship_data(relationships, "dough")
            base_value["doughId"] = dough["id"] if dough else None
        return base_value

    @staticmethod
    def ingredient_ids(relationships: Mapping) -> Optional[List[Any]]:
        """
        :return: the ingredient ids, or None when the request has no ingredients relationship
        """
        if "ingredients" not in relationships:
            return None
        ingredients = relationship_data(relationships, "ingredients") or []
        return list(dict.fromkeys(ingredient["id"] for ingredient in ingredients))

    def write_pizza(self, executor: Executor, bind_params: BindParams, pizza_id: Any = None) -> Optional[Dict[str, Any]]:
        """
        Insert a new pizza, or update pizza `pizza_id`

        :return: the raw pizza
        """
        try:
            if pizza_id is None:
                return self.insert(executor, bind_params)
            return self.update(executor, pizza_id, bind_params)
        except IntegrityError as exc:
            if is_foreign_key_violation(exc):
                raise ResourceRelationNotFoundError("dough", bind_params.get("doughId")) from exc
            raise

    def check_ingredients(self, executor: Executor, ingredient_ids: Sequence[Any]) -> None:
        if ingredient_ids and not ids_exist(executor, self.ingredient_schema.table, ingredient_ids):
            raise ResourceRelationNotFoundError("ingredients", *ingredient_ids)

    def insert_ingredients(self, executor: Executor, pizza_id: Any, ingredient_ids: Sequence[Any]) -> None:
        if not ingredient_ids:
            return
        bind_params = [{"pizzaId": pizza_id, "ingredientId": ingredient_id} for ingredient_id in ingredient_ids]
        try:
            executor.execute(INSERT_PIZZA_INGREDIENT, bind_params)
        except IntegrityError as exc:
            if is_foreign_key_violation(exc):
                raise ResourceRelationNotFoundError("ingredients", *ingredient_ids) from exc
            raise

    def replace_ingredients(self, executor: Executor, pizza_id: Any, ingredient_ids: Sequence[Any]) -> None:
        executor.execute(DELETE_PIZZA_INGREDIENTS, {"pizzaId": pizza_id})
        self.insert_ingredients(executor, pizza_id, ingredient_ids)

    def pizza_exists(self, executor: Executor, pizza_id: Any) -> bool:
        return ids_exist(executor, self.schema.table, [pizza_id])

    def post(self, body: Mapping) -> Dict[str, Any]:
        """
        Create a pizza and its ingredients relationship in a single transaction

        :param body: validated jsonapi request body
        :return: jsonapi document with the created pizza
        """
        relationships = body["data"].get("relationships") or {}
        bind_params = get_bind_params(body, self.schema.attribute_names, self.dough_bind_params(relationships, {}))
        ingredient_ids = self.ingredient_ids(relationships) or []

        with self.connect() as executor:
            with executor.transaction():
                self.check_ingredients(executor, ingredient_ids)
                raw_pizza = self.write_pizza(executor, bind_params)
                self.insert_ingredients(executor, raw_pizza["id"], ingredient_ids)

        pizzapi.log.info(f"Created pizza {raw_pizza['id']} with ingredients {ingredient_ids}")
        return self.serializer.serialize_resource(raw_pizza, self.resource_path(raw_pizza["id"]))

    def patch(self, pizza_id: Any, body: Mapping) -> Optional[Dict[str, Any]]:
        """
        Update the attributes of a pizza, its dough and/or replace its ingredients

        :param pizza_id: id from the url
        :param body: validated jsonapi request body
        :return: jsonapi document with the updated pizza, or None if the pizza doesn't exist
        """
        attributes = body["data"].get("attributes") or {}
        relationships = body["data"].get("relationships") or {}
        if not attributes and not relationships:
            return self.get_by_id(pizza_id)

        bind_params = get_bind_params(body, self.schema.attribute_names, self.dough_bind_params(relationships, {"id": pizza_id}))
        ingredient_ids = self.ingredient_ids(relationships)

        with self.connect() as executor:
            with executor.transaction():
                if len(bind_params) > 1:
                    raw_pizza = self.write_pizza(executor, bind_params, pizza_id)
                    if raw_pizza is None:
                        return None
                elif not self.pizza_exists(executor, pizza_id):
                    return None

                if ingredient_ids is not None:
                    self.check_ingredients(executor, ingredient_ids)
                    self.replace_ingredients(executor, pizza_id, ingredient_ids)

        # the response shows the relationships that were changed
        includes = [name for name in self.includable if name in relationships]
        return self.get_by_id(pizza_id, includes)
