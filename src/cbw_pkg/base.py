"""Base interfaces for the CBW package."""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Dict, Any


class DataStructure(ABC):
    """Base interface for simulation result structures."""

    @abstractmethod
    def validate(self) -> bool:
        """Validate data structure consistency."""
        pass

    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary format."""
        pass

    @classmethod
    @abstractmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DataStructure':
        """Create from dictionary data."""
        pass
