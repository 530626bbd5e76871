"""
StarEntity Core Module

Domain layer: entities, entity sets, relationships and mappers.
"""

from .interfaces import EntityLike, EntityFactory, FieldAccessor, Exportable, SelfValidating
from .registry import EntityRegistry, entity_registry
from .set import EntitySet, EntitySetIterator, construct_entity
from .relations import Relation, HasOne, HasMany, has_one, has_many
from .mappers import mapper, MapperInfo
from .entity import Entity

__all__ = [
    "Entity",
    "EntitySet",
    "EntitySetIterator",
    "construct_entity",
    "EntityLike",
    "EntityFactory",
    "FieldAccessor",
    "Exportable",
    "SelfValidating",
    "EntityRegistry",
    "entity_registry",
    "Relation",
    "HasOne",
    "HasMany",
    "has_one",
    "has_many",
    "mapper",
    "MapperInfo",
]
