# pizzapi to json encoding

import datetime
import decimal
import json
from uuid import UUID
import pizzapi


class PizzaJSONEncoder(json.JSONEncoder):
    """
    JSON encoding for the values a database driver may return
    """

    # pylint: disable=method-hidden
    def default(self, obj):
        """
        override the default json encoding
        :param obj: object to be encoded
        :return: encoded/serialized object
        """
        if isinstance(obj, decimal.Decimal):
            # NUMBER columns, eg. from oracle or postgres
            if obj == obj.to_integral_value():
                return int(obj)
            return float(obj)
        if isinstance(obj, datetime.datetime):
            return obj.isoformat(" ")
        if isinstance(obj, (datetime.date, datetime.time)):
            return obj.isoformat()
        if isinstance(obj, datetime.timedelta):
            return str(obj)
        if isinstance(obj, set):
            return list(obj)
        if isinstance(obj, UUID):  # pragma: no cover
            return str(obj)
        if isinstance(obj, bytes):  # pragma: no cover
            pizzapi.log.debug("PizzaJSONEncoder: serializing bytes obj")
            return obj.hex()

        pizzapi.log.warning(f'JSON Encoding Error: Unknown object type "{type(obj)}" for {obj}')
        return super().default(obj)
