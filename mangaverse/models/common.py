import uuid


def new_id():
    return str(uuid.uuid4())


def iso(value):
    return value.isoformat() if value is not None else None
