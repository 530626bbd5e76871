"""
StarEntity - Typed Entities and Entity Sets

Entities with typed fields, named mappers, declarative validation and
relationships, plus EntitySet: an ordered, densely indexed, queryable
collection of entities of one declared type.
"""

from .core import (
    Entity,
    EntitySet,
    EntitySetIterator,
    construct_entity,
    EntityLike,
    EntityRegistry,
    entity_registry,
    HasOne,
    HasMany,
    has_one,
    has_many,
    mapper,
)
from .validation import (
    Validatable,
    ValidationRule,
    FieldValidationRule,
    EntityValidationRule,
    ValidationResult,
    validates,
    validates_entity,
)
from .exceptions import (
    StarEntityError,
    TypeMismatchError,
    InvalidArgumentError,
    UnknownEntityTypeError,
    EntityValidationError,
)
from .config import (
    Environment,
    SetConfig,
    LoggingConfig,
    StarEntityConfig,
    get_config,
    set_config,
    reset_config,
    configure_logging,
)

__version__ = "0.1.0"

__all__ = [
    # Core entity components
    'Entity',
    'EntitySet',
    'EntitySetIterator',
    'construct_entity',
    'EntityLike',
    'EntityRegistry',
    'entity_registry',
    'HasOne',
    'HasMany',
    'has_one',
    'has_many',
    'mapper',

    # Validation
    'Validatable',
    'ValidationRule',
    'FieldValidationRule',
    'EntityValidationRule',
    'ValidationResult',
    'validates',
    'validates_entity',

    # Errors
    'StarEntityError',
    'TypeMismatchError',
    'InvalidArgumentError',
    'UnknownEntityTypeError',
    'EntityValidationError',

    # Configuration
    'Environment',
    'SetConfig',
    'LoggingConfig',
    'StarEntityConfig',
    'get_config',
    'set_config',
    'reset_config',
    'configure_logging',
]
