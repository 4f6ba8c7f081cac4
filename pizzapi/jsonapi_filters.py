"""
JSON:API filtering: https://jsonapi.org/recommendations/#filtering

Only equality filters are supported, the `filter[<attribute>]=<value>` query arguments
are translated to sql conditionals and bind parameters, eg.

    {"filter[name]": "margherita"} => "NAME = :name", {"name": "margherita"}
"""

import re
from collections.abc import Mapping
import pizzapi
from typing import Any, Dict, Iterable

FILTER_NAME_RE = re.compile(r"filter\[(.+)\]")


class GetFilterProcessor:
    """
    Process the filters of a GET collection request for a single resource type
    """

    def __init__(self, get_parameters: Iterable[Any], column_names: Mapping) -> None:
        """
        :param get_parameters: the declared GET parameters of the collection, each carrying a `name`
        :param column_names: mapping of (normalized) filter names to database column names
        """
        self.get_parameters = tuple(get_parameters)
        self.column_names = column_names
        self.normalized_get_filters = [self.normalize_filter_name(_parameter_name(param)) for param in self.get_parameters]

    @staticmethod
    def normalize_filter_name(filter_name: str) -> str:
        """
        Remove the "filter[]" wrapper from a filter parameter
        :param filter_name: eg. "filter[name]"
        :return: the filter name with 'filter' and brackets removed, eg. "name"
        """
        match = FILTER_NAME_RE.fullmatch(filter_name)
        return match.group(1) if match else filter_name

    @classmethod
    def normalize_filter_names(cls, filters: Mapping) -> Dict[str, Any]:
        """
        :param filters: query arguments
        :return: filters with the keys changed to remove the "filter[]" wrapper
        """
        return {cls.normalize_filter_name(name): value for name, value in filters.items()}

    def process_get_filters(self, filters: Mapping) -> Dict[str, Any]:
        """
        Process `filters` into a string of `conditionals` like `NAME = :name AND TYPE = :type`
        and bind params like `{"name": "margherita", "type": "vegetarian"}`

        The conditionals follow the order of the declared parameters, undeclared filters are ignored.

        :param filters: query arguments
        :return: dict with "bind_params" and "conditionals"
        """
        normalized_filters = self.normalize_filter_names(filters)
        valid_filters = [name for name in self.normalized_get_filters if name in normalized_filters]

        ignored = set(normalized_filters) - set(valid_filters)
        if ignored:
            pizzapi.log.debug(f"Ignoring undeclared filters {sorted(ignored)}")

        conditionals = " AND ".join(f"{self.column_names[name]} = :{name}" for name in valid_filters)
        bind_params = {name: normalized_filters[name] for name in valid_filters}

        return {"bind_params": bind_params, "conditionals": conditionals}


def _parameter_name(parameter):
    """
    :param parameter: swagger parameter object (dict) or an object with a `name` attribute
    """
    if isinstance(parameter, Mapping):
        return parameter["name"]
    return parameter.name
