from rfid_api.store import ValidationFailed


def missing_fields(data, fields):
    if data is None:
        data = {}
    if not isinstance(data, dict):
        # a JSON array or scalar carries none of the fields
        return list(fields)
    return [field for field in fields if not data.get(field)]


def validate_request(data, fields):
    """Raise ValidationFailed when ``data`` is not an object or any of ``fields`` is absent or empty."""
    missing = missing_fields(data, fields)
    if missing:
        raise ValidationFailed(missing)
    return data


def json_object(data):
    """Request body as a dict; non-object JSON bodies are rejected."""
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationFailed(["body"])
    return data
