"""
Entity Sets

An EntitySet is an ordered, densely indexed collection holding entities of
one declared type. Every insertion path coerces its value through
``ensure_entity`` so members are always instances of the declared type.
Indices are renumbered after every removal; there are never gaps.
"""

import logging
import pickle
import re
from collections.abc import Iterable, Mapping
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple, Type, Union

from ..config import SetConfig, get_config
from ..exceptions import InvalidArgumentError, TypeMismatchError
from ..validation.validatable import Validatable
from .interfaces import EntityFactory, EntityLike, FieldAccessor
from .registry import entity_registry

logger = logging.getLogger(__name__)


def construct_entity(entity_type: Type, data: Any, mapper: Optional[str] = None) -> EntityLike:
    """
    Default entity factory.

    Uses ``entity_type.from_data(data, mapper)`` when the type provides it,
    otherwise calls ``entity_type(data, mapper)``.
    """
    from_data = getattr(entity_type, "from_data", None)
    if from_data is not None:
        return from_data(data, mapper)
    return entity_type(data, mapper)


def _as_index(offset: Any) -> Optional[int]:
    """Convert a numeric offset to an int; anything else yields None."""
    if isinstance(offset, bool):
        return None
    if isinstance(offset, int):
        return offset
    if isinstance(offset, (float, str)):
        try:
            return int(float(offset))
        except (ValueError, OverflowError):
            return None
    return None


def _subject(value: Any) -> str:
    return "" if value is None else str(value)


class EntitySetIterator:
    """
    Forward-only cursor over an EntitySet, restartable from position zero.

    The cursor reads the live set, so it observes mutations made while
    iterating.
    """

    def __init__(self, entity_set: 'EntitySet'):
        self._set = entity_set
        self._position = 0

    def current(self) -> Any:
        """Return the entity under the cursor, or None past the end"""
        return self._set.get(self._position)

    def key(self) -> Optional[int]:
        """Return the cursor position, or None past the end"""
        return self._position if self.valid() else None

    def next(self) -> 'EntitySetIterator':
        self._position += 1
        return self

    def rewind(self) -> 'EntitySetIterator':
        self._position = 0
        return self

    def valid(self) -> bool:
        return self._set.exists(self._position)

    def __iter__(self) -> 'EntitySetIterator':
        return self

    def __next__(self) -> Any:
        if not self.valid():
            raise StopIteration
        item = self.current()
        self._position += 1
        return item


class EntitySet(Validatable):
    """
    Ordered collection of entities of a single declared type.

    Example:
        comments = EntitySet(CommentEntity, [{"body": "first"}, {"body": "second"}])
        comments.append({"body": "third"})
        comments.find({"body": "^s"}).count()  # 1
    """

    def __init__(self,
                 entity_type: Union[Type, str],
                 data: Any = None,
                 mapper: Optional[str] = None,
                 *,
                 factory: Optional[EntityFactory] = None,
                 config: Optional[SetConfig] = None):
        """
        Create a new entity set.

        Args:
            entity_type: The class (or registered class name) the set represents
            data: Raw entity data or entities to import through ``fill``
            mapper: Import mapper name used for ``data``
            factory: Callable ``(entity_type, raw, mapper) -> entity``
            config: Behaviour switches (defaults to the global ``SetConfig``)
        """
        entity_type = entity_registry.resolve(entity_type)
        if not isinstance(entity_type, type):
            raise InvalidArgumentError(f"An entity set must represent a class, not {entity_type!r}")

        self._entity_type = entity_type
        self._entities: List[Any] = []
        self._validators: Dict[str, Any] = {}
        self._factory: EntityFactory = factory or construct_entity
        self._config: SetConfig = config or get_config().sets

        self.fill(data, mapper)

    @property
    def entity_type(self) -> Type:
        """The class every member is an instance of"""
        return self._entity_type

    @property
    def config(self) -> SetConfig:
        return self._config

    # Type enforcement

    def is_representing(self, entity_type: Any) -> bool:
        """
        Return whether the set represents the given type.

        Accepts a class, an instance (its runtime class is used) or a class name.
        """
        if isinstance(entity_type, str):
            return entity_type in (
                self._entity_type.__name__,
                f"{self._entity_type.__module__}.{self._entity_type.__qualname__}",
            )
        if not isinstance(entity_type, type):
            entity_type = type(entity_type)
        return self._entity_type is entity_type

    def must_represent(self, entity_type: Any) -> 'EntitySet':
        """
        Ensure the set represents the given type.

        Raises:
            TypeMismatchError: naming the declared and the requested type
        """
        if not self.is_representing(entity_type):
            raise TypeMismatchError(self._entity_type, entity_type)
        return self

    def ensure_entity(self, item: Any, mapper: Optional[str] = None) -> EntityLike:
        """Return ``item`` if it already is a member type, otherwise build one from it"""
        if isinstance(item, self._entity_type):
            return item
        return self._factory(self._entity_type, item, mapper)

    # Bulk import / export

    def fill(self, data: Any, mapper: Optional[str] = None) -> 'EntitySet':
        """
        Append every value of ``data`` as a member.

        Accepts sequences, iterables, mappings (their values are used) and
        single entities. Anything else is ignored.
        """
        if data is None:
            return self

        if isinstance(data, FieldAccessor):
            members = [data]
        elif isinstance(data, Mapping):
            members = list(data.values())
        elif isinstance(data, Iterable) and not isinstance(data, (str, bytes, bytearray)):
            members = list(data)
        else:
            logger.debug(f"Ignoring non-iterable fill data of type {type(data).__name__}")
            return self

        for value in members:
            self._entities.append(self.ensure_entity(value, mapper))

        logger.debug(f"Filled {len(members)} {self._entity_type.__name__} entities (mapper={mapper})")
        return self

    def to_array(self, mapper: Optional[str] = None) -> List[Dict[str, Any]]:
        """Export every member with ``to_array(mapper)``, in index order"""
        return [item.to_array(mapper) for item in self._entities]

    def clear(self) -> 'EntitySet':
        self._entities = []
        return self

    # Positional access

    def get(self, index: Any, default: Any = None) -> Any:
        """Return the entity at ``index`` or ``default`` if there is none"""
        idx = _as_index(index)
        if idx is None or not 0 <= idx < len(self._entities):
            return default
        return self._entities[idx]

    def exists(self, index: Any) -> bool:
        idx = _as_index(index)
        return idx is not None and 0 <= idx < len(self._entities)

    def set(self, index: Any, value: Any) -> 'EntitySet':
        """
        Assign an entity at ``index`` without shifting other members.

        A non-numeric index (e.g. ``None``) appends. Assigning at the
        current count appends as well.

        Raises:
            IndexError: if the index is negative or would leave a gap
        """
        item = self.ensure_entity(value)
        idx = _as_index(index)
        count = len(self._entities)

        if idx is None:
            idx = count

        if idx < 0 or idx > count:
            raise IndexError(f"Cannot assign entity set index {idx}; valid range is 0..{count}")

        if idx == count:
            self._entities.append(item)
        else:
            self._entities[idx] = item
        return self

    def unset(self, index: Any) -> 'EntitySet':
        """Remove the entity at ``index`` if present and close the gap"""
        if self.exists(index):
            del self._entities[_as_index(index)]
        return self

    def __getitem__(self, index: Any) -> Any:
        if not self.exists(index):
            raise IndexError(f"Entity set index out of range: {index!r}")
        return self._entities[_as_index(index)]

    def __setitem__(self, index: Any, value: Any) -> None:
        self.set(index, value)

    def __delitem__(self, index: Any) -> None:
        self.unset(index)

    # Insertion / removal

    def push(self, index: Any, item: Any = None) -> 'EntitySet':
        """
        Insert an item before ``index``, shifting later members forward.

        An index past the end appends; negative indices count from the end.
        """
        idx = _as_index(index)
        if idx is None:
            idx = len(self._entities)

        item = self.ensure_entity(item)
        self._entities = self._entities[:idx] + [item] + self._entities[idx:]
        return self

    def append(self, item: Any = None) -> 'EntitySet':
        """Append an item; with no argument an empty entity is added"""
        return self.push(len(self._entities), item)

    def prepend(self, item: Any = None) -> 'EntitySet':
        return self.push(0, item)

    def pull(self, index: Any) -> Any:
        """Remove the entity at ``index`` and return it, or None if absent"""
        item = self.get(index)
        if item is None:
            return None
        self.unset(index)
        return item

    def move_to(self, current_index: Any, new_index: Any) -> 'EntitySet':
        """
        Move an item to ``new_index``.

        The item is removed first, so ``new_index`` refers to the sequence
        without it: ``[A, B, C].move_to(0, 2)`` gives ``[B, C, A]``.
        """
        item = self.get(current_index)
        if item is not None:
            self.unset(current_index)
            self.push(new_index, item)
            logger.debug(f"Moved entity from {current_index} to {new_index}")
        return self

    def remove(self, query: Mapping) -> 'EntitySet':
        """Remove every member matching ``query``"""
        keys = set(self.find_keys(query))
        self._entities = [item for key, item in enumerate(self._entities) if key not in keys]
        logger.debug(f"Removed {len(keys)} entities matching {dict(query)}")
        return self

    # Filtering / reduction

    def filter(self, predicate: Callable[[Any], Any]) -> 'EntitySet':
        """Keep members for which ``predicate(member)`` is not ``False``"""
        if not callable(predicate):
            raise InvalidArgumentError('The passed argument is not callable.')

        keys = [key for key, item in self.items() if predicate(item) is not False]
        return self.reduce(keys)

    def reduce(self, indices: Any) -> 'EntitySet':
        """
        Restrict the set to the given indices (a single index or an iterable).

        Indices that do not exist are ignored. If none exist the set is cleared.
        """
        if isinstance(indices, (str, bytes)) or not isinstance(indices, Iterable):
            indices = [indices]

        count = len(self._entities)
        found = set()
        for index in indices:
            idx = _as_index(index)
            if idx is not None and 0 <= idx < count:
                found.add(idx)

        if not found:
            return self.clear()

        self._entities = [item for key, item in enumerate(self._entities) if key in found]
        return self

    # Querying

    def _compile_query(self, query: Mapping) -> List[Tuple[str, 're.Pattern']]:
        if not isinstance(query, Mapping):
            raise InvalidArgumentError(f"A query must be a mapping of field name to pattern, got {type(query).__name__}")
        return [(name, re.compile(str(pattern))) for name, pattern in query.items()]

    def find_keys(self, query: Mapping, limit: int = 0, offset: int = 0) -> List[int]:
        """
        Return the indices of members matching ``query``.

        A query maps field names to regular expressions searched against the
        field value. A member matches when every field matches; unless
        ``SetConfig.unique_find_keys`` is set its index is emitted once per
        query field.

        Args:
            query: field name -> pattern
            limit: stop once this many indices are collected (0 = no limit)
            offset: skip members below this index

        Raises:
            re.error: if a pattern is not a valid regular expression
        """
        patterns = self._compile_query(query)
        keys: List[int] = []
        if not patterns:
            return keys

        for key, item in self.items():
            if offset and offset > key:
                continue

            if limit and len(keys) >= limit:
                break

            matched = [name for name, pattern in patterns if pattern.search(_subject(item.get_field(name)))]
            if len(matched) != len(patterns):
                continue

            if self._config.unique_find_keys:
                keys.append(key)
            else:
                keys.extend(key for _ in matched)

        return keys

    def find_key(self, query: Mapping) -> Optional[int]:
        """Return the index of the first matching member, or None"""
        found = self.find_keys(query, 1)
        return found[0] if found else None

    def find(self, query: Mapping, limit: int = 0, offset: int = 0) -> 'EntitySet':
        """Return a new set holding the matching members, reindexed from zero"""
        clone = self.copy()
        return clone.reduce(clone.find_keys(query, limit, offset))

    def find_one(self, query: Mapping) -> Any:
        """Return the first matching entity, or None"""
        clone = self.copy()
        key = clone.find_key(query)
        if key is None:
            return None
        return clone.reduce(key).get(0)

    # Traversal / aggregation

    def walk(self, callback: Callable[[Any], Any]) -> 'EntitySet':
        """
        Call ``callback(entity)`` for every member in index order.

        Raises:
            InvalidArgumentError: if callback is not callable
        """
        if not callable(callback):
            raise InvalidArgumentError('The passed argument is not callable.')

        for entity in list(self._entities):
            callback(entity)
        return self

    def aggregate(self, field: str) -> List[Any]:
        """Collect the value of ``field`` from every member"""
        return [item.get_field(field) for item in self._entities]

    def validate(self) -> List[str]:
        """
        Validate every member and return the collected messages.

        With ``SetConfig.validate_per_rule`` (the default) each member's
        messages are appended once per validator registered on the set, so a
        set without validators reports nothing. Otherwise member messages are
        collected once and the set's own rules run against the set.
        """
        messages: List[str] = []
        validators = self.get_validators()

        if self._config.validate_per_rule:
            for entity in list(self._entities):
                for _name in validators:
                    messages.extend(entity.validate())
            return messages

        for entity in list(self._entities):
            messages.extend(entity.validate())
        messages.extend(self.run_validators().get_error_messages())
        return messages

    def first(self) -> Any:
        return self.get(0)

    def last(self) -> Any:
        return self.get(len(self._entities) - 1)

    def count(self) -> int:
        """Return the number of entities in the set"""
        return len(self._entities)

    def items(self) -> Iterator[Tuple[int, Any]]:
        """Yield ``(index, entity)`` pairs over a snapshot of the members"""
        return iter(list(enumerate(self._entities)))

    def __len__(self) -> int:
        return len(self._entities)

    def __iter__(self) -> EntitySetIterator:
        return EntitySetIterator(self)

    def __contains__(self, item: Any) -> bool:
        return item in self._entities

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, EntitySet):
            return NotImplemented
        return self._entity_type is other._entity_type and self._entities == other._entities

    __hash__ = None

    def __repr__(self) -> str:
        return f"EntitySet({self._entity_type.__name__}, count={len(self._entities)})"

    # Copying / serialization

    def copy(self) -> 'EntitySet':
        """Shallow copy: a new set holding the same member instances"""
        clone = type(self).__new__(type(self))
        clone._entity_type = self._entity_type
        clone._entities = list(self._entities)
        clone._validators = dict(self._validators)
        clone._factory = self._factory
        clone._config = self._config
        return clone

    __copy__ = copy

    def __getstate__(self) -> Dict[str, Any]:
        return {
            "entity_type": self._entity_type,
            "data": self.to_array(),
            "validators": self._validators,
        }

    def __setstate__(self, state: Dict[str, Any]) -> None:
        self._entity_type = entity_registry.resolve(state["entity_type"])
        self._validators = dict(state["validators"])
        self._entities = []
        self._factory = construct_entity
        self._config = get_config().sets
        self.fill(state["data"])

    def serialize(self) -> bytes:
        """
        Serialize the declared type, exported member data and validators.

        Members are rebuilt through the entity factory on ``unserialize``,
        so the restored set holds fresh instances. A custom factory is not
        serialized.
        """
        return pickle.dumps(self)

    @classmethod
    def unserialize(cls, payload: bytes) -> 'EntitySet':
        """
        Restore a set produced by ``serialize``. Only use with trusted input.

        Raises:
            InvalidArgumentError: if the payload does not hold an entity set
        """
        restored = pickle.loads(payload)
        if not isinstance(restored, cls):
            raise InvalidArgumentError(f"Payload does not contain a {cls.__name__}")
        return restored


__all__ = ["EntitySet", "EntitySetIterator", "construct_entity"]
