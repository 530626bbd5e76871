"""
StarEntity Validation

Rule objects, result types and the Validatable capability shared by
entities and entity sets.
"""

from .rules import (
    ValidationFailure,
    ValidationResult,
    ValidationRule,
    FieldValidationRule,
    EntityValidationRule,
)
from .validatable import Validatable, validates, validates_entity

__all__ = [
    "ValidationFailure",
    "ValidationResult",
    "ValidationRule",
    "FieldValidationRule",
    "EntityValidationRule",
    "Validatable",
    "validates",
    "validates_entity",
]
