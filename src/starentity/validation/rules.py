"""
Validation Rules

Rule objects evaluated against entities (or entity sets) and the result
types they produce. A rule never raises for a failing value; failures,
including exceptions thrown by the wrapped validator, are reported through
the returned ``ValidationResult``.
"""

from typing import List, Dict, Any, Optional, Callable
from dataclasses import dataclass, field
from abc import ABC, abstractmethod

@dataclass
class ValidationFailure:
    """Represents a single failed check"""
    field: Optional[str]
    message: str
    code: Optional[str] = None
    context: Dict[str, Any] = field(default_factory=dict)

@dataclass
class ValidationResult:
    """Failures collected by one or more rules"""
    is_valid: bool = True
    errors: List[ValidationFailure] = field(default_factory=list)

    def add_error(self, field: Optional[str], message: str,
                  code: Optional[str] = None, **context):
        """Record a failure and mark the result invalid"""
        self.errors.append(ValidationFailure(field, message, code, context))
        self.is_valid = False

    def merge(self, other: 'ValidationResult') -> 'ValidationResult':
        """Fold another result into this one"""
        self.errors.extend(other.errors)
        if other.has_errors():
            self.is_valid = False
        return self

    def has_errors(self) -> bool:
        """True when at least one failure was recorded"""
        return bool(self.errors)

    def get_errors_by_field(self, field: str) -> List[ValidationFailure]:
        """Failures recorded against one field"""
        return [e for e in self.errors if e.field == field]

    def get_error_messages(self) -> List[str]:
        """Failure messages in the order they were recorded"""
        return [e.message for e in self.errors]

class ValidationRule(ABC):
    """A named check that entities and entity sets can carry"""

    @abstractmethod
    def validate(self, target: Any, field: Optional[str] = None) -> ValidationResult:
        """Check ``target``; when ``field`` is given only rules for that field apply"""
        pass

class FieldValidationRule(ValidationRule):
    """Checks one named value with ``validator(value, target)``"""

    def __init__(self, field_name: str, validator: Callable, message: str, code: Optional[str] = None):
        self.field_name = field_name
        self.validator = validator
        self.message = message
        self.code = code

    def validate(self, target: Any, field: Optional[str] = None) -> ValidationResult:
        """Run the validator against one named value of the target"""
        result = ValidationResult()

        if field and field != self.field_name:
            return result

        if hasattr(target, "get_field"):
            value = target.get_field(self.field_name)
        else:
            value = getattr(target, self.field_name, None)

        try:
            if not self.validator(value, target):
                result.add_error(self.field_name, self.message, self.code)
        except Exception as e:
            result.add_error(self.field_name, f"Validation error: {e}", "VALIDATION_EXCEPTION")

        return result

    def __repr__(self) -> str:
        return f"FieldValidationRule({self.field_name!r}, message={self.message!r})"

class EntityValidationRule(ValidationRule):
    """Checks the whole target with ``validator(target)``"""

    def __init__(self, validator: Callable, message: str, code: Optional[str] = None):
        self.validator = validator
        self.message = message
        self.code = code

    def validate(self, target: Any, field: Optional[str] = None) -> ValidationResult:
        """Run the validator against the whole target"""
        result = ValidationResult()

        if field:
            return result

        try:
            if not self.validator(target):
                result.add_error(None, self.message, self.code)
        except Exception as e:
            result.add_error(None, f"Validation error: {e}", "ENTITY_VALIDATION_EXCEPTION")

        return result

    def __repr__(self) -> str:
        return f"EntityValidationRule(message={self.message!r})"

__all__ = [
    "ValidationFailure", "ValidationResult",
    "ValidationRule", "FieldValidationRule", "EntityValidationRule"
]
