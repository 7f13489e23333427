from utils.errors import ValidationError

def require_fields(data: dict, fields: list):
    missing = [f for f in fields if f not in data or data.get(f) in (None, "", [])]
    if missing:
        raise ValidationError("Validation failed", missing_fields=missing)

def parse_int(value, name: str, default=None, minimum=None):
    if value in (None, ""):
        return default
    if isinstance(value, bool):
        raise ValidationError(f"{name} must be an integer", field=name)
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be an integer", field=name)
    if minimum is not None and number < minimum:
        raise ValidationError(f"{name} must be >= {minimum}", field=name)
    return number

def json_body(request):
    data = request.get_json(force=True, silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Invalid JSON")
    return data
