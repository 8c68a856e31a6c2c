# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""School fees and fee payments."""

from datetime import datetime
from enum import Enum

from pydantic import Field

from olkalou.infrastructure.database.models.base import RemoteEntity, require_member
from olkalou.utils.datetime import ensure_utc, utc_now


class PaymentStatus(str, Enum):
    PENDING = "Pending"
    PARTIAL = "Partial"
    PAID = "Paid"
    OVERDUE = "Overdue"


class PaymentMethod(str, Enum):
    CASH = "Cash"
    MPESA = "M-Pesa"
    BANK_TRANSFER = "Bank Transfer"
    CHEQUE = "Cheque"
    CARD = "Card"


_PAYMENT_STATUSES = frozenset(s.value for s in PaymentStatus)
_PAYMENT_METHODS = frozenset(m.value for m in PaymentMethod)


class Fees(RemoteEntity):
    """Fee account of one student for one term.

    Attributes:
        total_fees: Amount billed for the term.
        paid_amount: Amount received so far. Never above total_fees.
        balance: Outstanding amount, see ``calculate_balance``.
        payment_status: One of PaymentStatus.
    """

    __tablename__ = "fees"

    student_id: str = Field(default="", min_length=1)
    total_fees: float = Field(default=0, ge=0)
    paid_amount: float = Field(default=0, ge=0)
    balance: float = 0
    year: int = Field(default_factory=lambda: utc_now().year, ge=2020, le=2050)
    term: int = Field(default=1, ge=1, le=3)
    due_date: datetime
    payment_status: str = Field(default=PaymentStatus.PENDING.value, min_length=1, max_length=50)
    last_payment_date: datetime | None = None
    discount_amount: float | None = Field(default=None, ge=0)
    discount_reason: str | None = Field(default=None, max_length=500)

    @property
    def is_overdue(self) -> bool:
        return utc_now() > ensure_utc(self.due_date) and self.balance > 0

    @property
    def days_overdue(self) -> int:
        if not self.is_overdue:
            return 0
        return (utc_now() - ensure_utc(self.due_date)).days

    def calculate_balance(self) -> None:
        self.balance = self.total_fees - self.paid_amount - (self.discount_amount or 0)

    def check_invariants(self) -> list[str]:
        errors = require_member(self.payment_status, _PAYMENT_STATUSES, "Invalid payment status")
        if self.paid_amount > self.total_fees:
            errors.append("Paid amount cannot exceed total fees")
        return errors


class FeesPayment(RemoteEntity):
    """A single payment towards a fee account."""

    __tablename__ = "fees_payments"

    fees_id: str | None = None
    student_id: str = Field(default="", min_length=1)
    amount: float = Field(default=0, ge=0.01)
    payment_method: str = Field(default="", min_length=1, max_length=50)
    receipt_number: str = Field(default="", min_length=1, max_length=100)
    transaction_id: str | None = Field(default=None, max_length=100)
    slip_image_url: str | None = None
    is_approved: bool = False
    is_scanned: bool = False
    payment_date: datetime = Field(default_factory=utc_now)
    verified_by: str | None = Field(default=None, max_length=100)
    verification_date: datetime | None = None
    description: str | None = Field(default=None, max_length=500)
    received_by: str = Field(default="", min_length=1, max_length=100)
    bank_name: str | None = Field(default=None, max_length=100)
    account_number: str | None = Field(default=None, max_length=50)

    def check_invariants(self) -> list[str]:
        errors = require_member(self.payment_method, _PAYMENT_METHODS, "Invalid payment method")
        if self.payment_method == PaymentMethod.BANK_TRANSFER.value and (
            not (self.bank_name or "").strip() or not (self.account_number or "").strip()
        ):
            errors.append("Bank name and account number are required for bank transfers")
        return errors
