"""
Core mixins for entity functionality.

These mixins provide reusable functionality that can be mixed into
any pydantic base model without inheritance conflicts.
"""

from .entity_mixin import EntityMixin

__all__ = ["EntityMixin"]
