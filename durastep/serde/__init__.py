from .deserializer import ResultDeserializer
from .serializer import ResultSerializer

__all__ = ["ResultSerializer", "ResultDeserializer"]
