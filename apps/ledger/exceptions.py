"""
Domain exceptions for the ledger app.

Views catch these and answer ``{'error': str(e), 'code': e.code}`` with
the matching HTTP status.
"""


class LedgerServiceError(Exception):
    """Base exception for ledger service errors."""
    code = 'ledger_error'


class InvalidQuantityError(LedgerServiceError):
    """Raised when a weight or point amount is not strictly positive."""
    code = 'invalid_quantity'


class UnknownMaterialError(LedgerServiceError):
    """Raised when a material has no entry in the rate table."""
    code = 'unknown_material'


class InsufficientBalanceError(LedgerServiceError):
    """Raised when a spend exceeds the owner's balance."""
    code = 'insufficient_balance'


class InvalidRedemptionMethodError(LedgerServiceError):
    """Raised when a redemption names a method outside the catalog."""
    code = 'invalid_redemption_method'


class LedgerEntryNotFoundError(LedgerServiceError):
    """Raised when a ledger entry does not exist or belongs to someone else."""
    code = 'not_found'


class ImmutableEntryError(LedgerServiceError):
    """Raised on any attempt to rewrite or delete a recorded entry."""
    code = 'immutable_entry'
