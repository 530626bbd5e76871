"""
StarEntity Exceptions

Error hierarchy shared by entities, entity sets and the validation layer.
Not-found conditions are never errors: lookups return ``None`` instead.
"""

from typing import Any, Iterator, List, Optional


class StarEntityError(Exception):
    """Base exception for all StarEntity errors"""
    pass


def _type_name(value: Any) -> str:
    if isinstance(value, str):
        return value
    if not isinstance(value, type):
        value = type(value)
    return f"{value.__module__}.{value.__qualname__}"


class TypeMismatchError(StarEntityError, TypeError):
    """Raised when an entity set does not represent the requested type"""

    def __init__(self, declared: Any, requested: Any):
        self.declared = _type_name(declared)
        self.requested = _type_name(requested)
        super().__init__(
            f'The entity set is representing "{self.declared}" not "{self.requested}".'
        )


class InvalidArgumentError(StarEntityError, TypeError):
    """Raised when an operation receives an argument it cannot use"""
    pass


class UnknownEntityTypeError(StarEntityError, LookupError):
    """Raised when an entity type name cannot be resolved"""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"No entity type is registered under the name {name!r}")


class EntityValidationError(StarEntityError):
    """
    Raised by ``assert_valid()`` when validation produced messages.

    Behaves like a read-only sequence of the collected messages so callers
    can inspect ``error[0]`` directly.
    """

    def __init__(self, messages: List[str], message: Optional[str] = None):
        self.messages = list(messages)
        super().__init__(message or f"Validation failed: {', '.join(self.messages)}")

    def __getitem__(self, index: int) -> str:
        return self.messages[index]

    def __len__(self) -> int:
        return len(self.messages)

    def __iter__(self) -> Iterator[str]:
        return iter(self.messages)


__all__ = [
    "StarEntityError",
    "TypeMismatchError",
    "InvalidArgumentError",
    "UnknownEntityTypeError",
    "EntityValidationError",
]
