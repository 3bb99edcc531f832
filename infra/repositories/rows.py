from typing import Any, Dict


def row_to_dict(obj: Any) -> Dict:
    return {c.name: getattr(obj, c.name) for c in obj.__table__.columns}
