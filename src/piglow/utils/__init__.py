"""Generic utility modules for piglow.

- gamma: Brightness gamma correction
- persistence: JSON load/save for Pydantic models
"""

from .gamma import gamma_correct, gamma_table
from .persistence import PydanticPersistence

__all__ = ["PydanticPersistence", "gamma_correct", "gamma_table"]
