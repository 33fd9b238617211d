"""Validation result models."""

from pydantic import BaseModel, Field


class ValidationResult(BaseModel):
    """Outcome of a structural or semantic check.

    ``warnings`` never affect ``valid``.
    """

    valid: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @classmethod
    def from_messages(cls, errors: list[str], warnings: list[str]) -> "ValidationResult":
        """Build a result whose validity follows from the error list."""
        return cls(valid=not errors, errors=errors, warnings=warnings)


class Check(BaseModel):
    """Answer to a ``can_*`` pre-check: ok, or not ok with a reason."""

    ok: bool
    reason: str | None = None

    model_config = {"frozen": True}

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def passed(cls) -> "Check":
        return cls(ok=True)

    @classmethod
    def failed(cls, reason: str) -> "Check":
        return cls(ok=False, reason=reason)
