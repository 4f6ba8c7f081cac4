#
# Conversion between jsonapi request bodies, sql bind parameters and database returns
#
import copy
import re
from .errors import InvalidAttributeError
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

BindValue = Union[str, int, float, None]
BindParams = Dict[str, BindValue]

OUT_BIND_RE = re.compile(r"(.*)Out")


def get_bind_params(body: Mapping, allowed_properties: Iterable[str], base_value: Optional[BindParams] = None) -> BindParams:
    """
    Generate bind params from a POST or PATCH body.
    The body is assumed to be validated already, so an invalid attribute found here
    is a server error rather than a client error.

    :param body: jsonapi request body
    :param allowed_properties: the only attribute names allowed from `body["data"]["attributes"]`
    :param base_value: bind params that should be included regardless of the body,
                       eg. out bind variables or relationship foreign keys
    :return: bind params, `base_value` updated with the attributes
    """
    attributes = body["data"].get("attributes") or {}
    allowed_properties = set(allowed_properties)
    for attribute_name in attributes:
        if attribute_name not in allowed_properties:
            raise InvalidAttributeError(attribute_name)

    bind_params = copy.deepcopy(base_value) if base_value else {}
    bind_params.update(attributes)
    return bind_params


def out_bind_param_to_property_name(out_bind_param_name: str) -> str:
    """
    Convert an output bind param name like `nameOut` to a property name like `name`

    :param out_bind_param_name:
    :return: the property name
    """
    match = OUT_BIND_RE.fullmatch(out_bind_param_name)
    return match.group(1) if match else out_bind_param_name


def convert_out_binds_to_raw_resource(out_binds: Mapping[str, List[Any]]) -> Dict[str, Any]:
    """
    Convert the out binds of a `RETURNING ... INTO ...` statement
    to the format of a row returned by a `SELECT` query, so it can be passed to the serializers

    :param out_binds: eg. {"idOut": [201], "nameOut": ["margherita"]}
    :return: eg. {"id": 201, "name": "margherita"}
    """
    raw_resource = {}
    for bind_name, bind_values in out_binds.items():
        (raw_resource[out_bind_param_to_property_name(bind_name)],) = bind_values
    return raw_resource
