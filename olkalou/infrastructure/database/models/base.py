# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Base model for rows stored in the remote backend.

Every table row is a Pydantic model deriving from RemoteEntity. Rows can
be built without validation through ``draft()`` so dependent fields (for
example a profile's ``user_id``) can be filled in first; ``validate_entity()``
then re-validates the current values and adds the entity's cross-field
rules on top.

Example:
    >>> band = GradingBand.draft(grade="A", min_percentage=80, max_percentage=100, points=12)
    >>> band.validate_entity().is_valid
    True
    >>> band.to_record()["grade"]
    'A'
"""

from datetime import datetime
from typing import Any, ClassVar, Self
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from olkalou.utils.datetime import utc_now


def new_id() -> str:
    """Generate a new row identifier."""
    return str(uuid4())


class ValidationResult(BaseModel):
    """Outcome of validating one row.

    Attributes:
        is_valid: True when no rule was violated.
        errors: One message per violated rule.
    """

    is_valid: bool = True
    errors: list[str] = Field(default_factory=list)

    @property
    def error_message(self) -> str:
        """All errors joined into a single line."""
        return "; ".join(self.errors)


class EntityValidationError(Exception):
    """Raised when a row fails validation before being written.

    Attributes:
        message: Human-readable error description.
        entity_name: Table name of the offending row.
        errors: Individual rule violations.
    """

    def __init__(self, entity_name: str, errors: list[str]) -> None:
        self.entity_name = entity_name
        self.errors = errors
        self.message = f"Validation failed: {'; '.join(errors)}"
        super().__init__(self.message)


class RemoteEntity(BaseModel):
    """Common columns and validation for every remote table row.

    Subclasses set ``__tablename__`` and override ``check_invariants`` for
    rules that span several fields or restrict a value to a fixed set.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
    )

    __tablename__: ClassVar[str]

    id: str = Field(default_factory=new_id)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime | None = None
    created_by: str | None = None
    updated_by: str | None = None

    @classmethod
    def draft(cls, **data: Any) -> Self:
        """Build a row without running validation."""
        return cls.model_construct(**data)

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> Self:
        """Build a row from a column mapping returned by the backend.

        Stored rows are not re-validated: data written before a rule
        changed must still be readable.
        """
        return cls.draft(**dict(record))

    def touch(self, by: str | None = None) -> None:
        """Stamp ``updated_at`` (and ``updated_by`` when given)."""
        self.updated_at = utc_now()
        if by is not None:
            self.updated_by = by

    def check_invariants(self) -> list[str]:
        """Return violations of entity-specific rules. Empty when none."""
        return []

    def validate_entity(self) -> ValidationResult:
        """Validate the row's current values.

        Field constraints come from the model declaration and are checked
        by re-validating the current values. Cross-field rules are checked
        whenever every field is present, even if a field constraint failed,
        so the caller sees all problems at once. A rule that cannot be
        evaluated because of a value already reported as invalid is
        skipped.

        Returns:
            ValidationResult listing every violation.
        """
        errors: list[str] = []
        checked: RemoteEntity = self
        try:
            # rules then see coerced values, e.g. "3" as 3
            checked = type(self).model_validate(dict(self.__dict__))
        except PydanticValidationError as e:
            errors.extend(_format_error(err) for err in e.errors())

        if all(name in self.__dict__ for name in type(self).model_fields):
            try:
                errors.extend(checked.check_invariants())
            except (TypeError, ValueError, AttributeError):
                if not errors:
                    raise

        return ValidationResult(is_valid=not errors, errors=errors)

    def validate_and_raise(self) -> None:
        """Validate the row, raising if any rule is violated.

        Raises:
            EntityValidationError: If validation fails.
        """
        result = self.validate_entity()
        if not result.is_valid:
            raise EntityValidationError(self.__tablename__, result.errors)

    def to_record(self) -> dict[str, Any]:
        """Column name to value mapping used for inserts."""
        return self.model_dump(by_alias=True, warnings=False)

    @classmethod
    def column_names(cls) -> list[str]:
        """Remote column names, in declaration order."""
        return [field.alias or name for name, field in cls.model_fields.items()]


def _format_error(err: dict[str, Any]) -> str:
    location = ".".join(str(part) for part in err.get("loc", ()))
    if location:
        return f"{location}: {err.get('msg', 'Invalid value')}"
    return err.get("msg", "Invalid value")


def require_member(value: Any, allowed: frozenset[str], message: str) -> list[str]:
    """Return ``[message]`` unless ``value`` is one of ``allowed``."""
    if value not in allowed:
        return [message]
    return []
