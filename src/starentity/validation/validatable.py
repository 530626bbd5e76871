"""
Validatable - Shared Validation Capability

✅ Shared validation contract:
Entities and entity sets both own a mapping of rule name -> ValidationRule
and expose ``validate()`` returning error messages. Entity classes can also
declare rules on the class body with the ``@validates`` and
``@validates_entity`` decorators.
"""

from typing import Any, Callable, ClassVar, Dict, List, Optional, Union

from ..exceptions import EntityValidationError, InvalidArgumentError
from .rules import (
    ValidationRule, ValidationResult, FieldValidationRule, EntityValidationRule
)


def validates(field_name: str, message: Optional[str] = None, code: Optional[str] = None):
    """
    Mark a method as a field validator.

    The method is called as ``method(entity, value)`` and returns a bool.
    """
    def decorator(func):
        func._validation_info = {
            "field": field_name,
            "message": message or f"{field_name} validation failed",
            "code": code or f"{field_name.upper()}_VALIDATION",
        }
        return func
    return decorator


def validates_entity(message: Optional[str] = None, code: Optional[str] = None):
    """Mark a method as an entity-level validator called as ``method(entity)``"""
    def decorator(func):
        func._validation_info = {
            "field": None,
            "message": message or "Entity validation failed",
            "code": code or "ENTITY_VALIDATION",
        }
        return func
    return decorator


def _rule_from_method(func: Callable) -> ValidationRule:
    info = func._validation_info
    if info["field"] is None:
        return EntityValidationRule(func, info["message"], info["code"])
    return FieldValidationRule(
        info["field"],
        lambda value, target: func(target, value),
        info["message"],
        info["code"],
    )


class Validatable:
    """
    Validation capability mixin.

    Instances keep their own ``_validators`` mapping; classes keep
    ``_class_validators`` collected from decorated methods and
    ``register_validator``. Instance rules override class rules with the
    same name.
    """

    _class_validators: ClassVar[Dict[str, ValidationRule]] = {}

    def __init_subclass__(cls, **kwargs):
        """Collect decorated validator methods when the class is created"""
        super().__init_subclass__(**kwargs)
        rules = dict(cls._class_validators)
        for attr_name, attr in vars(cls).items():
            if callable(attr) and hasattr(attr, "_validation_info"):
                rules[attr_name] = _rule_from_method(attr)
        cls._class_validators = rules

    @classmethod
    def register_validator(cls, name: str, rule: Union[ValidationRule, Callable]) -> None:
        """Register a rule for every instance of this class"""
        cls._class_validators = {**cls._class_validators, name: _as_rule(name, rule)}

    def get_validators(self) -> Dict[str, ValidationRule]:
        """Return the rules that apply to this object, keyed by name"""
        validators = dict(self._class_validators)
        validators.update(self._validators)
        return validators

    def add_validator(self, name: str, rule: Union[ValidationRule, Callable]) -> Any:
        """Add a rule to this object only"""
        self._validators[name] = _as_rule(name, rule)
        return self

    def remove_validator(self, name: str) -> Any:
        """Remove an instance rule if present"""
        self._validators.pop(name, None)
        return self

    def run_validators(self, field: Optional[str] = None) -> ValidationResult:
        """Evaluate every applicable rule and merge the results"""
        result = ValidationResult()
        for rule in self.get_validators().values():
            result.merge(rule.validate(self, field))
        return result

    def validate(self) -> List[str]:
        """Validate and return the error messages"""
        return self.run_validators().get_error_messages()

    def is_valid(self) -> bool:
        return not self.validate()

    def assert_valid(self) -> Any:
        """
        Validate and raise if anything failed.

        Raises:
            EntityValidationError: carrying the collected messages
        """
        messages = self.validate()
        if messages:
            raise EntityValidationError(messages)
        return self


def _as_rule(name: str, rule: Union[ValidationRule, Callable]) -> ValidationRule:
    if isinstance(rule, ValidationRule):
        return rule
    if callable(rule):
        return EntityValidationRule(rule, f"{name} validation failed")
    raise InvalidArgumentError(f"Validator {name!r} must be a ValidationRule or a callable")


__all__ = ["Validatable", "validates", "validates_entity"]
