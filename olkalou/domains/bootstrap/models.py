# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Data models for the bootstrap domain.

This module defines Pydantic models and enums for:
- Bootstrap phases and step outcomes
- The report returned by a run and the progress events emitted during it
- The read-only status view and generic operation results
"""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from olkalou.infrastructure.state.tracker import CURRENT_SCHEMA_VERSION, MigrationState
from olkalou.utils.datetime import utc_now


class BootstrapPhase(str, Enum):
    """Where a run currently is.

    Phases advance in declaration order. FAILED is entered from
    VERIFYING_CONNECTION or VERIFYING_TABLES, or on an unexpected error.
    """

    IDLE = "idle"
    VERIFYING_CONNECTION = "verifying_connection"
    VERIFYING_TABLES = "verifying_tables"
    SEEDING_GRADING = "seeding_grading"
    SEEDING_DEFAULT_USERS = "seeding_default_users"
    SEEDING_SAMPLE_DATA = "seeding_sample_data"
    FINALIZING = "finalizing"
    DONE = "done"
    FAILED = "failed"


class StepStatus(str, Enum):
    """Outcome of one bootstrap step.

    - SUCCESS: Step completed or had nothing to do
    - WARNING: Step failed, the run continues
    - FATAL: Step failed, the run stops
    """

    SUCCESS = "success"
    WARNING = "warning"
    FATAL = "fatal"


class StepResult(BaseModel):
    """Immutable outcome of one step.

    Attributes:
        status: Success, warning or fatal.
        error_message: Why the step failed. None on success.
        detail: Optional note, e.g. "adopted existing rows".
    """

    model_config = ConfigDict(frozen=True)

    status: StepStatus
    error_message: str | None = None
    detail: str | None = None

    @property
    def success(self) -> bool:
        return self.status == StepStatus.SUCCESS

    @property
    def is_fatal(self) -> bool:
        return self.status == StepStatus.FATAL

    @classmethod
    def ok(cls, detail: str | None = None) -> "StepResult":
        return cls(status=StepStatus.SUCCESS, detail=detail)

    @classmethod
    def warning(cls, message: str) -> "StepResult":
        return cls(status=StepStatus.WARNING, error_message=message)

    @classmethod
    def fatal(cls, message: str) -> "StepResult":
        return cls(status=StepStatus.FATAL, error_message=message)


class InitializationReport(BaseModel):
    """Result of one bootstrap run.

    ``success`` is false only when the connection or table check failed or
    the run hit an unexpected error. Seeding failures are listed in
    ``warnings`` and leave ``success`` true.

    Attributes:
        success: Whether the run completed.
        error_message: Cause of an unsuccessful run.
        duration_ms: Wall time of the run.
        warnings: One message per failed seeding step or sub-seeder.
        metadata: Per-step outcomes under ``steps`` plus run identifiers.
    """

    success: bool = False
    error_message: str | None = None
    duration_ms: float = 0.0
    warnings: list[str] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)


class ProgressEvent(BaseModel):
    """Advisory progress notification."""

    step_name: str
    percent_complete: int = Field(ge=0, le=100)
    details: str | None = None
    is_completed: bool = False
    error_message: str | None = None


class InitializationStatus(BaseModel):
    """Read-only view of bootstrap progress.

    Sample data is reported but does not count towards completion.
    """

    tables_verified: bool = False
    grading_seeded: bool = False
    default_users_seeded: bool = False
    sample_data_seeded: bool = False
    schema_version: int = 0
    current_schema_version: int = CURRENT_SCHEMA_VERSION
    is_up_to_date: bool = False
    is_fully_initialized: bool = False
    completion_percentage: int = 0

    @classmethod
    def from_state(
        cls,
        state: MigrationState,
        current_schema_version: int = CURRENT_SCHEMA_VERSION,
    ) -> "InitializationStatus":
        is_up_to_date = state.schema_version >= current_schema_version
        counted = (
            state.tables_verified,
            state.grading_seeded,
            state.default_users_seeded,
            is_up_to_date,
        )
        return cls(
            tables_verified=state.tables_verified,
            grading_seeded=state.grading_seeded,
            default_users_seeded=state.default_users_seeded,
            sample_data_seeded=state.sample_data_seeded,
            schema_version=state.schema_version,
            current_schema_version=current_schema_version,
            is_up_to_date=is_up_to_date,
            is_fully_initialized=all(counted),
            completion_percentage=25 * sum(counted),
        )

    def summary(self) -> str:
        """Render a checklist for humans."""

        def mark(done: bool) -> str:
            return "✓" if done else "✗"

        return "\n".join(
            [
                "Database Initialization Status:",
                f"- Tables Verified: {mark(self.tables_verified)}",
                f"- Grading System: {mark(self.grading_seeded)}",
                f"- Default Users: {mark(self.default_users_seeded)}",
                f"- Sample Data: {mark(self.sample_data_seeded)}",
                f"- Up to Date: {mark(self.is_up_to_date)}",
                f"- Completion: {self.completion_percentage}%",
            ]
        )


class OperationResult(BaseModel):
    """Generic success/failure result."""

    success: bool
    error_message: str | None = None
    details: str | None = None
    timestamp: datetime = Field(default_factory=utc_now)

    @classmethod
    def succeeded(cls, details: str | None = None) -> "OperationResult":
        return cls(success=True, details=details)

    @classmethod
    def failed(cls, message: str, details: str | None = None) -> "OperationResult":
        return cls(success=False, error_message=message, details=details)
