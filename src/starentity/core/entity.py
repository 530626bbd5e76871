from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, PrivateAttr

from ..validation import Validatable, ValidationRule
from .mixins import EntityMixin
from .registry import entity_registry


class Entity(EntityMixin, Validatable, BaseModel):
    """
    Base class for all entity classes.

    Entities are built from raw data, optionally through a named import
    mapper, and export back with ``to_array(mapper)``. ``data`` and
    ``mapper`` are reserved constructor arguments and cannot be field names.

    Example:
        class CommentEntity(Entity):
            body: str = ""

        class ContentEntity(Entity):
            id: Optional[int] = None
            name: Optional[str] = None
            user: Annotated[UserEntity, has_one()] = None
            comments: Annotated[EntitySet, has_many(CommentEntity)] = None

            @mapper("legacy", direction="import")
            def from_legacy(cls, data):
                return {"name": data.get("title")}

            @validates("name", message="A name is required.")
            def check_name(self, value):
                return bool(value)
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    _validators: Dict[str, ValidationRule] = PrivateAttr(default_factory=dict)

    def __init__(self, data: Any = None, mapper: Optional[str] = None, **kwargs):
        super().__init__(**self.import_data(data, mapper, kwargs))

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs: Any) -> None:
        super().__pydantic_init_subclass__(**kwargs)

        # Relationships and mappers need the finished model_fields
        cls._bind_entity_metadata()
        entity_registry.register(cls)
