"""
Mapper Decorator System

The @mapper decorator stores metadata only. Entity classes collect the
decorated methods when they are created and apply them by name during
import (construction) and export (``to_array``).
"""

from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

IMPORT = "import"
EXPORT = "export"


@dataclass
class MapperInfo:
    """Metadata about a mapper method stored by the @mapper decorator."""
    name: str
    direction: str
    func: Optional[Callable] = None


def mapper(name: str, *, direction: str = EXPORT):
    """
    Mark a method as a named data mapper.

    Export mappers are called as ``method(entity, data)`` with the exported
    dict. Import mappers run before the instance exists and are called as
    ``method(entity_class, data)`` with the raw mapping. Both return the
    transformed dict.

    Args:
        name: Mapper name passed to ``to_array()`` / the constructor
        direction: ``"export"`` or ``"import"``
    """
    if direction not in (IMPORT, EXPORT):
        raise ValueError(f"Mapper direction must be {IMPORT!r} or {EXPORT!r}, got {direction!r}")

    def decorator(func):
        func._mapper_info = MapperInfo(name=name, direction=direction)
        return func

    return decorator


def collect_mappers(cls) -> Dict[Tuple[str, str], MapperInfo]:
    """Collect mapper methods across the MRO; subclasses override by (name, direction)."""
    mappers: Dict[Tuple[str, str], MapperInfo] = {}
    for klass in reversed(cls.__mro__):
        for attr in vars(klass).values():
            info = getattr(attr, "_mapper_info", None)
            if isinstance(info, MapperInfo):
                mappers[(info.name, info.direction)] = MapperInfo(info.name, info.direction, attr)
    return mappers


__all__ = ["mapper", "MapperInfo", "collect_mappers", "IMPORT", "EXPORT"]
