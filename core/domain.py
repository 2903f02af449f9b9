"""
Domain Layer Base Classes.

The domain layer contains pure logic with no external dependencies.
This makes the rules:
- Easy to test (no mocking needed)
- Reusable across different interfaces
- Clear and self-documenting

Example Usage:
    class DoctorFormValidator(Validator):
        def validate(self, data: dict) -> List[ValidationError]:
            ...
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Union


@dataclass
class ValidationError:
    """A validation error with field and message."""
    field: str
    message: str
    code: str = "invalid"


class Validator(ABC):
    """
    Abstract base class for validators.

    Validators check that data meets requirements before it is submitted.
    """

    @abstractmethod
    def validate(self, data: Dict[str, Any]) -> List[ValidationError]:
        """
        Validate the data and return any errors.

        Args:
            data: The data to validate

        Returns:
            List of ValidationError objects (empty if valid)
        """
        pass

    def is_valid(self, data: Dict[str, Any]) -> bool:
        """Check if data is valid."""
        return len(self.validate(data)) == 0


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================

def blank_to_none(value: Optional[str]) -> Optional[str]:
    """Trim a text input; blank becomes None (never an empty string)."""
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def parse_calendar_date(value: Union[str, date, datetime]) -> date:
    """
    Parse a calendar date from a date picker value.

    Accepts a date, a datetime (time is dropped) or an ISO string
    ("2024-01-02" or "2024-01-02T09:30:00").

    Raises:
        ValueError: if the string is not an ISO date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if "T" in text:
        return datetime.fromisoformat(text).date()
    return date.fromisoformat(text)
