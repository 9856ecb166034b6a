"""Base class for order calculators.

Each calculator works on one order at a time and keeps counters of what it
did (orders calculated, rejections, commits) so commands can log them in
debug mode.
"""

from abc import ABC, abstractmethod
from collections import Counter
from datetime import datetime, timezone
from typing import Any, Dict, Generic, TypeVar
import logging


class CalculationStats:
    """Named counters; unknown counters read as 0."""

    def __init__(self):
        object.__setattr__(self, '_counts', Counter())
        object.__setattr__(self, 'started_at', datetime.now(timezone.utc))

    def __getattr__(self, name: str) -> int:
        if name.startswith('_'):
            raise AttributeError(name)
        return self._counts[name]

    def __setattr__(self, name: str, value: int) -> None:
        self._counts[name] = value

    def __getitem__(self, key: str) -> int:
        return self._counts[key]

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {'started_at': self.started_at.isoformat()}
        result.update(self._counts)
        return result


# Result type produced by a calculator
T = TypeVar('T')


class BaseCalculator(ABC, Generic[T]):
    """Abstract base class for calculators over a single order."""

    def __init__(self, debug: bool = False):
        self.debug = debug
        self.logger = logging.getLogger(f"order_finance.calculations.{self.__class__.__name__}")
        self.stats = CalculationStats()

    @abstractmethod
    def calculate(self, order) -> T:
        """Run the calculation for one order."""

    def get_stats(self) -> Dict[str, Any]:
        return self.stats.to_dict()
