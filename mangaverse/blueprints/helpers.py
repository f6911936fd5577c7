import json

from flask import request

from mangaverse.errors import ValidationError


def get_payload():
    """Return the request body as a dict, from JSON or form fields."""
    if request.is_json:
        data = request.get_json(silent=True)
        if data is None:
            raise ValidationError("Invalid JSON in request body")
        if not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object")
        return data
    return request.form.to_dict()


def parse_int(value, field, default=None, minimum=None):
    if value is None or value == "":
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be an integer")
    if minimum is not None and number < minimum:
        raise ValidationError(f"{field} must be at least {minimum}")
    return number


def parse_limit(default, maximum=100):
    limit = parse_int(request.args.get("limit"), "limit", default=default, minimum=1)
    return min(limit, maximum) if limit else default


def parse_list(value, field):
    # Multipart forms send arrays as JSON strings.
    if value is None or value == "":
        return []
    if isinstance(value, list):
        return [str(v) for v in value]
    if isinstance(value, str):
        try:
            parsed = json.loads(value)
        except ValueError:
            return [part.strip() for part in value.split(",") if part.strip()]
        if isinstance(parsed, list):
            return [str(v) for v in parsed]
    raise ValidationError(f"{field} must be a list")


def parse_bool(value):
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in ("1", "true", "yes", "on")
