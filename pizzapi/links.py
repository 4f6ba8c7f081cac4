# jsonapi "links" members
from urllib.parse import urlencode
from .config import get_config
from typing import Mapping, Optional


def api_base_url() -> str:
    """
    :return: the url of the api root, eg. "/v1"
    """
    return get_config("API_PREFIX", "").rstrip("/")


def resource_path_link(base_url: str, path: str) -> str:
    """
    :param base_url: eg. "/v1"
    :param path: path relative to `base_url`, eg. "pizzas/1"
    :return: eg. "/v1/pizzas/1"
    """
    return f"{base_url}/{str(path).strip('/')}"


def params_link(url: str, query: Optional[Mapping] = None) -> str:
    """
    Append the query arguments to `url`, so the self link of a filtered collection echoes the filters

    :param url: eg. "/v1/pizzas"
    :param query: request query arguments, eg. {"filter[name]": "abc"}
    :return: eg. "/v1/pizzas?filter[name]=abc"
    """
    if not query:
        return url
    return f"{url}?{urlencode({name: query[name] for name in query}, safe='[],')}"
