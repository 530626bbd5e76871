"""
Entity Capability Interfaces

Structural contracts an entity-like object must satisfy to live in an
EntitySet. The set depends on these protocols only, never on the concrete
Entity base class, so plain classes paired with a custom factory work too.
"""

from typing import Any, Callable, Dict, List, Optional, Protocol, Type, runtime_checkable


@runtime_checkable
class FieldAccessor(Protocol):
    """Named property access used by queries and aggregation."""

    def get_field(self, name: str) -> Any: ...


@runtime_checkable
class Exportable(Protocol):
    """Export to an ordered mapping, optionally through a named mapper."""

    def to_array(self, mapper: Optional[str] = None) -> Dict[str, Any]: ...


@runtime_checkable
class SelfValidating(Protocol):
    """Validation returning error messages."""

    def validate(self) -> List[str]: ...


@runtime_checkable
class EntityLike(FieldAccessor, Exportable, SelfValidating, Protocol):
    """Everything an EntitySet needs from its members."""
    pass


# construct(entity_type, raw_data, mapper_name) -> entity instance
EntityFactory = Callable[[Type[Any], Any, Optional[str]], EntityLike]


__all__ = ["FieldAccessor", "Exportable", "SelfValidating", "EntityLike", "EntityFactory"]
