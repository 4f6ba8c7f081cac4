#
# Reconstruct nested resources from flat sql join rows
#
# The join queries alias the columns as <PREFIX>_<attributeName>, eg.
#
#   PIZZA_id | PIZZA_name  | DOUGH_id | DOUGH_name | INGREDIENT_id | INGREDIENT_name
#   1        | margherita  | 3        | neapolitan | 5             | basil
#   1        | margherita  | 3        | neapolitan | 8             | mozzarella
#
# which is grouped into
#
#   {"id": 1, "name": "margherita", "dough": {"id": 3, ...}, "ingredients": [{"id": 5, ...}, {"id": 8, ...}]}
#
from dataclasses import dataclass
from .errors import InternalConsistencyError
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple


def extract_raw_resource(prefix: str, attribute_names: Iterable[str], row: Mapping) -> Optional[Dict[str, Any]]:
    """
    Extract the attributes of the resource with prefix `prefix` from a row
    with column names formatted like PREFIX_attributeName

    :param prefix: resource prefix, eg. "DOUGH"
    :param attribute_names: the attribute names of the resource, including "id"
    :param row: flat database row
    :return: the raw resource, or None when the row holds no such resource (NULL id from a LEFT JOIN)
    """
    if row[f"{prefix}_id"] is None:
        return None
    return {name: row[f"{prefix}_{name}"] for name in attribute_names}


@dataclass(frozen=True)
class Relation:
    """
    A related resource embedded in the join rows

    :param name: key of the embedded resource(s) in the parent, eg. "ingredients"
    :param prefix: column alias prefix, eg. "INGREDIENT"
    :param attribute_names: attribute names of the related resource
    :param many: True for to-many relationships
    """

    name: str
    prefix: str
    attribute_names: Tuple[str, ...]
    many: bool = False

    @property
    def id_column(self) -> str:
        return f"{self.prefix}_id"


class JoinRowGrouper:
    """
    Group the rows of a parent resource LEFT JOINed with its relations into nested resources.

    The rows of a parent have to be adjacent, the queries order them by the parent id.
    """

    def __init__(self, prefix: str, attribute_names: Iterable[str], relations: Sequence[Relation] = ()) -> None:
        self.prefix = prefix
        self.attribute_names = tuple(attribute_names)
        self.relations = tuple(relations)
        self.id_column = f"{prefix}_id"

    def included_relations(self, row: Mapping) -> List[Relation]:
        """
        :param row: a row returned by the query
        :return: the relations that were joined in the query that returned `row`
        """
        return [relation for relation in self.relations if relation.id_column in row]

    def normalize_join_rows(self, rows: Sequence[Mapping]) -> List[Dict[str, Any]]:
        """
        :param rows: flat join rows, ordered by parent id
        :return: list of raw parent resources, with the related resources embedded
        """
        if not rows:
            return []

        included = self.included_relations(rows[0])
        to_one = [relation for relation in included if not relation.many]
        to_many = [relation for relation in included if relation.many]

        resources = []
        index = 0
        while index < len(rows):
            head = rows[index]
            resource = extract_raw_resource(self.prefix, self.attribute_names, head)
            if resource is None:
                raise InternalConsistencyError(f"Row without {self.id_column}")

            for relation in to_one:
                related = extract_raw_resource(relation.prefix, relation.attribute_names, head)
                resource[relation.name] = related if related is not None else {}

            if to_many:
                seen = {relation.name: set() for relation in to_many}
                for relation in to_many:
                    resource[relation.name] = []
                while index < len(rows) and rows[index][self.id_column] == head[self.id_column]:
                    for relation in to_many:
                        related = extract_raw_resource(relation.prefix, relation.attribute_names, rows[index])
                        if related is None or related["id"] in seen[relation.name]:
                            continue
                        seen[relation.name].add(related["id"])
                        resource[relation.name].append(related)
                    index += 1
            else:
                index += 1

            resources.append(resource)

        return resources
