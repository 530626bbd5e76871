"""
Entity Registry

Maps entity class names to classes so relationships can name their target
before it is defined. Entity subclasses register themselves on creation.
"""

import logging
from typing import Dict, Optional, Type, Union

from ..exceptions import UnknownEntityTypeError

logger = logging.getLogger(__name__)


class EntityRegistry:
    """
    Registry of entity classes keyed by class name.

    Registering a second class under an existing name replaces the first;
    the most recently defined class wins.
    """

    def __init__(self):
        self._entity_types: Dict[str, Type] = {}

    def register(self, entity_cls: Type, name: Optional[str] = None) -> Type:
        """
        Register an entity class.

        Args:
            entity_cls: The class to register
            name: Registry key (defaults to the class name)

        Returns:
            The registered class, so this can be used as a decorator
        """
        key = name or entity_cls.__name__
        previous = self._entity_types.get(key)
        if previous is not None and previous is not entity_cls:
            logger.debug(f"Entity type {key!r} re-registered: {previous.__module__} -> {entity_cls.__module__}")
        self._entity_types[key] = entity_cls
        return entity_cls

    def unregister(self, name: str) -> None:
        self._entity_types.pop(name, None)

    def resolve(self, target: Union[str, Type]) -> Type:
        """
        Resolve a class or registered class name to a class.

        Raises:
            UnknownEntityTypeError: if a name is not registered
        """
        if not isinstance(target, str):
            return target
        try:
            return self._entity_types[target]
        except KeyError:
            raise UnknownEntityTypeError(target) from None

    def is_registered(self, name: str) -> bool:
        return name in self._entity_types

    def __contains__(self, name: str) -> bool:
        return self.is_registered(name)

    def __len__(self) -> int:
        return len(self._entity_types)


entity_registry = EntityRegistry()


__all__ = ["EntityRegistry", "entity_registry"]
