"""
Pydantic models for parsed bank statement data.
"""
from datetime import date, datetime
from typing import Tuple

from pydantic import BaseModel, ConfigDict, field_validator, model_validator
from pydantic.alias_generators import to_camel


ACCEPTED_CURRENCIES = ("EGP", "USD", "EUR", "GBP")
ACCOUNT_NUMBER_LENGTH = 19


class StatementModel(BaseModel):
    """Frozen model with camelCase aliases on the wire."""
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


class StatementHeader(StatementModel):
    """Statement-level metadata."""
    timestamp: datetime
    customer_id: str
    customer_name: str
    account_number: str
    currency: str
    opening_balance: float
    closing_balance: float
    period_start: date
    period_end: date

    @field_validator('account_number')
    @classmethod
    def validate_account_number(cls, v):
        if len(v) != ACCOUNT_NUMBER_LENGTH or not v.isdigit():
            raise ValueError(f"Account number must be exactly {ACCOUNT_NUMBER_LENGTH} digits: {v!r}")
        return v

    @field_validator('currency')
    @classmethod
    def validate_currency(cls, v):
        if v not in ACCEPTED_CURRENCIES:
            raise ValueError(f"Unsupported currency: {v!r}")
        return v


class TransactionRecord(StatementModel):
    """Individual transaction record."""
    transaction_date: date
    value_date: date
    reference_no: str = ""
    description: str
    debit: float = 0.0
    credit: float = 0.0
    balance: float

    @model_validator(mode='after')
    def validate_debit_credit(self):
        """Debit and credit are non-negative and never both set."""
        if self.debit < 0 or self.credit < 0:
            raise ValueError(f"Debit and credit must be non-negative: {self.description}")
        if self.debit and self.credit:
            raise ValueError(f"Transaction cannot be both debit and credit: {self.description}")
        return self


class StatementDocument(StatementModel):
    """Complete statement data structure."""
    template_id: str
    header: StatementHeader
    transactions: Tuple[TransactionRecord, ...]
