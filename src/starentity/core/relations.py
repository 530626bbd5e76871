"""
Entity Relationships

Relationship markers attached to entity fields through ``Annotated``
metadata::

    class ContentEntity(Entity):
        user: Annotated[UserEntity, has_one()] = None
        comments: Annotated[EntitySet, has_many("CommentEntity")] = None

Related values are always instantiated: a missing has-one becomes an empty
target entity and a missing has-many becomes an empty EntitySet.
"""

from typing import Any, Optional, Type, Union, get_args, get_origin

from .registry import entity_registry
from .set import EntitySet, construct_entity


def _strip_optional(annotation: Any) -> Any:
    if get_origin(annotation) is Union:
        args = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


class Relation:
    """Base relationship marker bound to one field of one entity class."""

    kind = "relation"

    def __init__(self, target: Union[str, Type, None] = None):
        self.target = target
        self.field_name: Optional[str] = None

    def bind(self, field_name: str, annotation: Any) -> 'Relation':
        """Return a copy of this marker bound to a concrete field"""
        bound = type(self)(self.target if self.target is not None else _strip_optional(annotation))
        bound.field_name = field_name
        return bound

    @property
    def target_type(self) -> Type:
        """The related entity class, resolving registered names lazily"""
        if self.target is None:
            raise TypeError(f"Relationship {self.field_name!r} has no target entity type")
        return entity_registry.resolve(self.target)

    def default(self) -> Any:
        raise NotImplementedError

    def coerce(self, value: Any, mapper: Optional[str] = None) -> Any:
        raise NotImplementedError

    def export(self, value: Any, mapper: Optional[str] = None) -> Any:
        if value is None:
            return None
        return value.to_array(mapper)

    def __repr__(self) -> str:
        target = self.target if isinstance(self.target, str) or self.target is None else self.target.__name__
        return f"{type(self).__name__}({target!r})"


class HasOne(Relation):
    """One-to-one relationship holding a single related entity."""

    kind = "has_one"

    def default(self) -> Any:
        return construct_entity(self.target_type, None, None)

    def coerce(self, value: Any, mapper: Optional[str] = None) -> Any:
        if value is None:
            return self.default()
        target = self.target_type
        if isinstance(value, target):
            return value
        return construct_entity(target, value, mapper)


class HasMany(Relation):
    """One-to-many relationship holding an EntitySet of related entities."""

    kind = "has_many"

    def default(self) -> EntitySet:
        return EntitySet(self.target_type)

    def coerce(self, value: Any, mapper: Optional[str] = None) -> EntitySet:
        if value is None:
            return self.default()
        target = self.target_type
        if isinstance(value, EntitySet) and value.is_representing(target):
            return value
        return EntitySet(target, value, mapper)


def has_one(target: Union[str, Type, None] = None) -> HasOne:
    """Declare a one-to-one relationship; the target defaults to the field annotation."""
    return HasOne(target)


def has_many(target: Union[str, Type]) -> HasMany:
    """Declare a one-to-many relationship to ``target`` (class or registered name)."""
    return HasMany(target)


__all__ = ["Relation", "HasOne", "HasMany", "has_one", "has_many"]
