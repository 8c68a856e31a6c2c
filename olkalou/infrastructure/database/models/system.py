# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Application settings rows and the audit trail."""

from enum import Enum

from pydantic import Field

from olkalou.infrastructure.database.models.base import RemoteEntity, require_member


class SettingCategory(str, Enum):
    GENERAL = "General"
    ACADEMIC = "Academic"
    FINANCIAL = "Financial"
    SYSTEM = "System"
    SECURITY = "Security"


class AuditAction(str, Enum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    LOGIN = "LOGIN"
    LOGOUT = "LOGOUT"
    VIEW = "VIEW"


_SETTING_CATEGORIES = frozenset(c.value for c in SettingCategory)
_AUDIT_ACTIONS = frozenset(a.value for a in AuditAction)


class AppSetting(RemoteEntity):
    __tablename__ = "app_settings"

    key: str = Field(default="", min_length=1, max_length=100)
    value: str = Field(default="", min_length=1, max_length=2000)
    description: str | None = Field(default=None, max_length=500)
    category: str = Field(default=SettingCategory.GENERAL.value, max_length=50)
    is_public: bool = False

    def check_invariants(self) -> list[str]:
        return require_member(self.category, _SETTING_CATEGORIES, "Invalid settings category")


class AuditLogEntry(RemoteEntity):
    """One audited user action. Old and new values are JSON text."""

    __tablename__ = "audit_logs"

    user_id: str = Field(default="", min_length=1)
    action: str = Field(default="", min_length=1, max_length=100)
    table_name: str | None = Field(default=None, max_length=100)
    record_id: str | None = Field(default=None, max_length=100)
    old_values: str | None = None
    new_values: str | None = None
    ip_address: str | None = Field(default=None, max_length=45)
    user_agent: str | None = Field(default=None, max_length=500)

    def check_invariants(self) -> list[str]:
        return require_member((self.action or "").upper(), _AUDIT_ACTIONS, "Invalid audit action")
