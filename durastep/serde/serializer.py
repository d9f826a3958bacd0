import dataclasses
import json
from typing import Any

from pydantic_core import to_jsonable_python

from ..errors import SerializationError


class ResultSerializer:
    """
    Serialize a step result for storage in a checkpoint.

    Supports:
    - Pydantic models
    - Dataclasses
    - Anything pydantic can turn into JSON (primitives, lists, dicts, datetimes, ...)
    """

    @staticmethod
    def serialize(value: Any) -> str:
        try:
            if hasattr(value, "model_dump") and callable(value.model_dump):
                data = value.model_dump(mode="json")
            elif dataclasses.is_dataclass(value) and not isinstance(value, type):
                data = to_jsonable_python(dataclasses.asdict(value))
            else:
                data = to_jsonable_python(value)
            return json.dumps(data)
        except Exception as e:
            raise SerializationError(
                f"Cannot serialize step result of type '{type(value).__name__}': {e}"
            ) from e
