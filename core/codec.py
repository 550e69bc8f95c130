"""
Codecs converting typed values to and from the text stored in the cache.

Plain strings pass through untouched, which keeps tokens and rendered
fragments free of JSON quoting. Everything else goes through a pydantic
``TypeAdapter`` built for the requested type, so models, dataclasses and
containers of them round-trip with full fidelity.
"""

from functools import lru_cache
from types import UnionType
from typing import Any, Generic, Optional, Type, TypeVar, Union, get_args, get_origin

from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from .errors import SerializationError

T = TypeVar("T")


class Codec(Generic[T]):
    """Encode values of one type to text and back."""

    def encode(self, value: Optional[T]) -> str:
        raise NotImplementedError

    def decode(self, text: Optional[str]) -> Optional[T]:
        raise NotImplementedError


class StringCodec(Codec[str]):
    """
    Identity codec for ``str`` and its subclasses.

    Subclasses such as ``str`` enums are stored as their plain text and
    rebuilt through the subclass on decode.
    """

    def __init__(self, type_: Type[str] = str):
        self.type_ = type_

    def encode(self, value: Optional[str]) -> str:
        if value is None:
            return ""
        if not isinstance(value, str):
            raise SerializationError(
                "Expected a string value",
                {"type": type(value).__name__}
            )
        # str.__str__ yields the raw text; str() on a str enum yields "Enum.MEMBER".
        return str.__str__(value)

    def decode(self, text: Optional[str]) -> Optional[str]:
        if not text:
            return None
        if self.type_ is str:
            return text
        try:
            return self.type_(text)
        except ValueError as exc:
            raise SerializationError(
                f"Cannot decode payload as {self.type_.__name__}",
                {"type": self.type_.__name__, "error": str(exc)}
            ) from exc


class JsonCodec(Codec[T]):
    """
    JSON codec backed by a pydantic ``TypeAdapter``.

    Decoding follows the target type's own validation config. Missing or
    mistyped fields fail, but extra fields are ignored unless the model sets
    ``extra="forbid"``, so a payload that is a superset of the requested
    model decodes successfully.
    """

    def __init__(self, type_: Type[T]):
        self.type_ = type_
        self._adapter = TypeAdapter(type_)

    def encode(self, value: Optional[T]) -> str:
        try:
            return self._adapter.dump_json(value).decode("utf-8")
        except (PydanticSerializationError, ValueError, TypeError) as exc:
            raise SerializationError(
                f"Cannot encode value as {self._type_name()}",
                {"type": self._type_name(), "error": str(exc)}
            ) from exc

    def decode(self, text: Optional[str]) -> Optional[T]:
        if not text:
            return None
        try:
            return self._adapter.validate_json(text)
        except ValidationError as exc:
            raise SerializationError(
                f"Cannot decode payload as {self._type_name()}",
                {"type": self._type_name(), "errors": exc.error_count()}
            ) from exc

    def _type_name(self) -> str:
        return getattr(self.type_, "__name__", repr(self.type_))


_STRING_CODEC = StringCodec()


def _string_type(type_: Any) -> Optional[Type[str]]:
    """Return the ``str`` type behind ``type_`` (unwrapping ``Optional``), if any."""
    if get_origin(type_) in (Union, UnionType):
        args = [arg for arg in get_args(type_) if arg is not type(None)]
        if len(args) != 1:
            return None
        type_ = args[0]
    if isinstance(type_, type) and issubclass(type_, str):
        return type_
    return None


@lru_cache(maxsize=256)
def codec_for(type_: Any) -> Codec:
    """Return the codec for ``type_``; resolved once per type."""
    string_type = _string_type(type_)
    if string_type is str:
        return _STRING_CODEC
    if string_type is not None:
        return StringCodec(string_type)
    return JsonCodec(type_)
