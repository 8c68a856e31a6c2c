"""Olkalou school data layer.

Entity catalog, remote store gateway and the idempotent database
bootstrap that prepares a fresh backend for the Olkalou student system.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "1.0.0"
