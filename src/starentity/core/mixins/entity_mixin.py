"""
EntityMixin: Core entity functionality without base model dependencies.

Provides named field access, import/export through named mappers and
relationship handling. Expects the host class to be a pydantic model
(``model_fields`` and ``model_dump``).
"""

import logging
from collections.abc import Mapping
from typing import Any, ClassVar, Dict, Optional, Tuple

from ...exceptions import InvalidArgumentError
from ..interfaces import Exportable
from ..mappers import EXPORT, IMPORT, MapperInfo, collect_mappers
from ..relations import Relation

logger = logging.getLogger(__name__)


class EntityMixin:
    """
    Core entity functionality mixin.

    Relationship markers and mapper methods are collected per class by
    ``_bind_entity_metadata`` once pydantic has built the model fields.
    """

    _relations: ClassVar[Dict[str, Relation]] = {}
    _mappers: ClassVar[Dict[Tuple[str, str], MapperInfo]] = {}

    @classmethod
    def _bind_entity_metadata(cls) -> None:
        relations = {}
        for field_name, field_info in cls.model_fields.items():
            for meta in field_info.metadata:
                if isinstance(meta, Relation):
                    relations[field_name] = meta.bind(field_name, field_info.annotation)
        cls._relations = relations
        cls._mappers = collect_mappers(cls)

    @classmethod
    def relations(cls) -> Dict[str, Relation]:
        """Relationship markers keyed by field name"""
        return dict(cls._relations)

    @classmethod
    def get_mapper(cls, name: Optional[str], direction: str) -> Optional[MapperInfo]:
        """Look up a mapper by name and direction; None when there is nothing to apply"""
        if not name:
            return None
        info = cls._mappers.get((name, direction))
        if info is None and (name, IMPORT) not in cls._mappers and (name, EXPORT) not in cls._mappers:
            logger.debug(f"{cls.__name__} has no mapper named {name!r}; data passed through unchanged")
        return info

    @staticmethod
    def _raw_values(data: Any) -> Dict[str, Any]:
        if data is None:
            return {}
        if isinstance(data, Mapping):
            return dict(data)
        if isinstance(data, Exportable):
            exported = data.to_array()
            if isinstance(exported, Mapping):
                return dict(exported)
        raise InvalidArgumentError(
            f"Cannot import entity data from {type(data).__name__}; expected a mapping or an entity"
        )

    @classmethod
    def import_data(cls, data: Any, mapper: Optional[str] = None,
                    overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Turn raw data into constructor values.

        Applies the named import mapper to ``data``, merges ``overrides``
        (already keyed by field name) and coerces relationship values.
        """
        values = cls._raw_values(data)

        info = cls.get_mapper(mapper, IMPORT)
        if info is not None:
            values = dict(info.func(cls, values))

        if overrides:
            values.update(overrides)

        for field_name, relation in cls._relations.items():
            values[field_name] = relation.coerce(values.get(field_name), mapper)

        return values

    @classmethod
    def from_data(cls, data: Any = None, mapper: Optional[str] = None) -> 'EntityMixin':
        """Entity factory hook used by EntitySet"""
        return cls(data, mapper)

    def get_field(self, name: str) -> Any:
        """Return a field, relation or property value by name; None if unknown"""
        try:
            return getattr(self, name)
        except AttributeError:
            return None

    def to_array(self, mapper: Optional[str] = None) -> Dict[str, Any]:
        """
        Export the entity to a dict in field order.

        Relations are exported with the same mapper name. The export mapper
        of that name, if defined, transforms the result. Fields declared
        with ``exclude=True`` are left out.
        """
        relations = type(self)._relations
        dumped = self.model_dump(exclude=set(relations))

        data: Dict[str, Any] = {}
        for field_name in type(self).model_fields:
            if field_name in relations:
                data[field_name] = relations[field_name].export(getattr(self, field_name), mapper)
            elif field_name in dumped:
                data[field_name] = dumped[field_name]

        info = type(self).get_mapper(mapper, EXPORT)
        if info is not None:
            data = dict(info.func(self, data))
        return data
