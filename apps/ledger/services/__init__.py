"""Services for the points ledger."""

from apps.ledger.exceptions import (
    LedgerServiceError,
    InvalidQuantityError,
    UnknownMaterialError,
    InsufficientBalanceError,
    InvalidRedemptionMethodError,
    LedgerEntryNotFoundError,
    ImmutableEntryError,
)
from .rates import RateTable
from .points import earn, spend, balance_of, ledger_sum, cash_value
from .history import (
    get_owner_entries,
    get_owner_entry,
    get_redemption_history,
    get_redemption_options,
)
from .statistics import get_deposit_stats, find_balance_mismatches

__all__ = [
    # Exceptions
    'LedgerServiceError',
    'InvalidQuantityError',
    'UnknownMaterialError',
    'InsufficientBalanceError',
    'InvalidRedemptionMethodError',
    'LedgerEntryNotFoundError',
    'ImmutableEntryError',
    # Rates
    'RateTable',
    # Ledger
    'earn',
    'spend',
    'balance_of',
    'ledger_sum',
    'cash_value',
    # History
    'get_owner_entries',
    'get_owner_entry',
    'get_redemption_history',
    'get_redemption_options',
    # Statistics
    'get_deposit_stats',
    'find_balance_mismatches',
]
