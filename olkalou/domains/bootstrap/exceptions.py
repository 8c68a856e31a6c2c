# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Exceptions raised by the bootstrap service.

Step failures are never raised: they are reported through StepResult and
the InitializationReport. These exceptions cover misuse of the service.
"""


class BootstrapError(Exception):
    """Base exception for bootstrap errors."""

    pass


class BootstrapConcurrencyError(BootstrapError):
    """Raised when the initializer cannot accept the call in its current state."""

    pass


class InitializerDisposedError(BootstrapConcurrencyError):
    """Raised when an initializer is used after dispose()."""

    def __init__(self, message: str = "Database initializer has been disposed") -> None:
        super().__init__(message)
