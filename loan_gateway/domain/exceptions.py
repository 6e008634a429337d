"""Domain-specific exceptions"""

from dataclasses import dataclass
from typing import Iterable, List


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


@dataclass(frozen=True)
class FieldError:
    """A single violated constraint on an input field"""

    field: str
    message: str


class ValidationError(DomainException):
    """
    Applicant data is outside its declared domain.

    Carries every violated constraint, not just the first one, so callers can
    surface all form errors at once.
    """

    def __init__(self, errors: Iterable[FieldError]):
        self.errors: List[FieldError] = list(errors)
        summary = "; ".join(f"{e.field}: {e.message}" for e in self.errors)
        super().__init__(summary or "Invalid input")

    @property
    def fields(self) -> List[str]:
        return [e.field for e in self.errors]

    def prefixed(self, prefix: str) -> "ValidationError":
        """Return a copy with every field name nested under ``prefix``"""
        return ValidationError(FieldError(f"{prefix}.{e.field}", e.message) for e in self.errors)

    def as_dicts(self) -> List[dict]:
        return [{"field": e.field, "message": e.message} for e in self.errors]
