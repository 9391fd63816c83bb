"""
Domain validators for the tracking write path.
"""

from typing import Any, Optional

from slidetrack.domain.exceptions import InvalidInputError
from slidetrack.domain.value_objects.email import normalize_email

MAX_EMAIL_LENGTH = 320
MAX_PROFILE_FIELD_LENGTH = 200


class TrackingValidators:
    @staticmethod
    def require(value: Any, name: str) -> None:
        """Correlation ids must be present; no partial processing otherwise."""
        if value is None or (isinstance(value, str) and not value.strip()):
            raise InvalidInputError(f"{name} is required")

    @staticmethod
    def validate_email(email: Optional[str]) -> str:
        """
        Normalise and sanity-check a viewer email.

        Deliverability is not checked; any syntactically plausible address is
        accepted.
        """
        normalized = normalize_email(email)
        if not normalized:
            raise InvalidInputError("email is required")

        if len(normalized) > MAX_EMAIL_LENGTH:
            raise InvalidInputError(
                f"email cannot exceed {MAX_EMAIL_LENGTH} characters"
            )

        local, sep, domain = normalized.rpartition("@")
        if not sep or not local or not domain or " " in normalized:
            raise InvalidInputError(f"Invalid email address: {email!r}")

        return normalized

    @staticmethod
    def validate_profile_field(value: Optional[str], name: str) -> None:
        if value is not None and len(value) > MAX_PROFILE_FIELD_LENGTH:
            raise InvalidInputError(
                f"{name} cannot exceed {MAX_PROFILE_FIELD_LENGTH} characters"
            )

    @staticmethod
    def validate_slide_number(slide_number: Any) -> int:
        """
        Slide numbers must be integers. Range is not checked against the deck's
        page count: page counts can be recomputed after upload.
        """
        TrackingValidators.require(slide_number, "slide_number")
        if isinstance(slide_number, bool) or not isinstance(slide_number, int):
            raise InvalidInputError("slide_number must be an integer")
        return slide_number

    @staticmethod
    def validate_seconds(value: Any, name: str) -> int:
        """Dwell times and durations are whole, non-negative seconds."""
        if value is None:
            return 0
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise InvalidInputError(f"{name} must be a number of seconds")
        if value < 0:
            raise InvalidInputError(f"{name} cannot be negative")
        return int(round(value))
