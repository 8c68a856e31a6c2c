# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Bootstrap domain.

This package provides the DatabaseInitializer that verifies the hosted
backend, seeds reference and demo data once, and tracks per-step
completion so repeated runs only do what is still missing.
"""

from olkalou.domains.bootstrap.exceptions import (
    BootstrapConcurrencyError,
    BootstrapError,
    InitializerDisposedError,
)
from olkalou.domains.bootstrap.models import (
    BootstrapPhase,
    InitializationReport,
    InitializationStatus,
    OperationResult,
    ProgressEvent,
    StepResult,
    StepStatus,
)
from olkalou.domains.bootstrap.service import DatabaseInitializer, ProgressCallback

__all__ = [
    # Service
    "DatabaseInitializer",
    "ProgressCallback",
    # Models
    "BootstrapPhase",
    "StepStatus",
    "StepResult",
    "InitializationReport",
    "ProgressEvent",
    "InitializationStatus",
    "OperationResult",
    # Exceptions
    "BootstrapError",
    "BootstrapConcurrencyError",
    "InitializerDisposedError",
]
