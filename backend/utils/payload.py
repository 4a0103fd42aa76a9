from flask import request

from services.errors import ServiceError


def json_body():
    """The request's JSON object; a missing or unparsable body reads as {}"""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ServiceError('Body must be a JSON object', 400)
    return data
