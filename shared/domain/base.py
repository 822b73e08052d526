"""
Base Domain Classes

Value objects are immutable and compared by value. They carry no database
identity and never touch the ORM, so the allocation engine can be exercised
without Django models.
"""

from abc import ABC
from dataclasses import dataclass


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects

    Value objects are immutable and have no identity.
    Two value objects are equal if all their attributes are equal.
    """
    pass
