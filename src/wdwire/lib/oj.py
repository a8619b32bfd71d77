"""orjson wrappers with the json module's call shape."""

from typing import Any

import orjson


def dumps(obj: Any) -> str:
    """Serialize to a JSON string."""
    return orjson.dumps(obj).decode("utf-8")


def loads(data: str | bytes | bytearray) -> Any:
    """Deserialize JSON text or bytes."""
    return orjson.loads(data)
