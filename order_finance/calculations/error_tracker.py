"""Collects command failures and rejected order operations for reporting."""

from collections import defaultdict
from typing import Dict, Optional, Set
import logging

from .results import ValidationError


class ErrorTracker:
    """Track and aggregate errors and rejections."""

    def __init__(self, max_samples: int = 3):
        """Initialize error tracker.

        Args:
            max_samples: Maximum number of samples to store per error type
        """
        self.error_counts = defaultdict(int)
        self.error_samples = defaultdict(list)
        self.max_samples = max_samples
        self.seen_errors: Set[str] = set()

    def add_error(self, error_type: str, message: str, context: Optional[Dict] = None) -> None:
        """Add an error occurrence.

        Identical type/message pairs are only counted once.

        Args:
            error_type: Category/type of error
            message: Error message
            context: Optional context data for the error
        """
        error_key = f"{error_type}:{message}"
        if error_key in self.seen_errors:
            return

        self.seen_errors.add(error_key)
        self.error_counts[error_type] += 1
        if len(self.error_samples[error_type]) < self.max_samples:
            self.error_samples[error_type].append({
                'message': message,
                'context': context or {}
            })

    def add_rejection(self, order_id: str, error: ValidationError) -> None:
        """Record a rejected transition or allocation for an order."""
        context = {'order': order_id}
        if error.shortfall:
            context['shortfall'] = round(error.shortfall, 2)
        if error.current_amount:
            context['current_amount'] = round(error.current_amount, 2)
        if error.total_percentage is not None:
            context['total_percentage'] = round(error.total_percentage, 2)
        self.add_error(error.kind.upper(), f"{order_id}: {error.message}", context)

    @property
    def has_errors(self) -> bool:
        return bool(self.error_counts)

    def get_summary(self) -> Dict:
        """Counts and samples per error type."""
        return {
            'counts': dict(self.error_counts),
            'samples': dict(self.error_samples)
        }

    def log_summary(self, logger: logging.Logger) -> None:
        """Log one line per error type, then its samples with their amounts."""
        for error_type, count in self.error_counts.items():
            logger.warning(f"{error_type}: {count} occurrence(s)")
            for sample in self.error_samples[error_type]:
                details = ', '.join(f"{key}={value}" for key, value in sample['context'].items())
                logger.warning(f"  {sample['message']} ({details})" if details else f"  {sample['message']}")
