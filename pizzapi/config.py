# Configuration settings should be set in app.config
# The defaults are kept as class variables of PizzApp, the environment may override them
import os
import logging
from flask import current_app
import pizzapi
from typing import Any, Optional


def get_config(option: str, default: Any = None) -> Optional[Any]:
    """Retrieve a configuration parameter from the app
    :param option: configuration parameter
    :param default: returned when the option isn't set anywhere
    :return: configuration value
    """
    try:
        result = current_app.config[option]
    except (KeyError, RuntimeError):
        # not configured in the app or working outside of the app context
        result = os.environ.get(option, getattr(pizzapi.PizzApp, option, None))
    if result is None:
        return default
    return result


def is_debug() -> bool:
    """
    We use the loglevel to check whether we're running in debug mode
    :return: whether the app is in debug mode
    :rtype: Boolean
    """
    return pizzapi.log.getEffectiveLevel() < logging.INFO
