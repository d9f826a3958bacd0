import json
from typing import Any, Optional

from pydantic import TypeAdapter

from ..errors import SerializationError


class ResultDeserializer:
    """
    Rebuild a step result from its checkpointed JSON text.

    Without ``return_type`` the plain JSON value is returned. With one, the
    text is validated into that type, so models and dataclasses come back as
    instances rather than dicts.
    """

    @staticmethod
    def deserialize(raw: str, return_type: Optional[Any] = None) -> Any:
        try:
            if return_type is None:
                return json.loads(raw)
            return TypeAdapter(return_type).validate_json(raw)
        except Exception as e:
            type_name = getattr(return_type, "__name__", repr(return_type))
            raise SerializationError(
                f"Failed to restore checkpointed result as '{type_name}': {e}"
            ) from e
