"""
Clinic Domain Policies.

Client-side form rules. These only decide whether a request is worth
sending; the backend remains the authority on what is accepted.
"""

from typing import Any, Dict, List

from core.domain import Validator, ValidationError


# Fields the add-doctor form must carry before it is submitted
REQUIRED_DOCTOR_FIELDS = ("name", "email", "password", "specialty")

# Patient appointment conditions understood by the backend
APPOINTMENT_CONDITIONS = ("past", "future")


class DoctorFormValidator(Validator):
    """Checks the add-doctor form for missing required fields."""

    def validate(self, data: Dict[str, Any]) -> List[ValidationError]:
        errors = []
        for name in REQUIRED_DOCTOR_FIELDS:
            value = data.get(name)
            if value is None or not str(value).strip():
                errors.append(ValidationError(field=name, message=f"{name} is required", code="required"))
        return errors
