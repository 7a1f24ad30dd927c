"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class UnsupportedFormatError(DomainError):
    """Statement file is neither OFX nor CSV."""


class InvalidBackupError(DomainError):
    """Backup document failed validation; nothing was restored."""


def transaction_not_found(transaction_id: str) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def patrimony_not_found(patrimony_id: str) -> str:
    """Return message for missing patrimony movement."""
    return f"Patrimony movement {patrimony_id} not found"


def category_not_found(category_id: str) -> str:
    """Return message for missing category by ID."""
    return f"Category {category_id} not found"


def non_positive_amount(amount) -> str:
    """Return message for an amount that is zero or negative."""
    return f"Amount must be greater than zero (got {amount})"


def category_type_mismatch(category_name: str, transaction_type: str) -> str:
    """Return message when a category cannot hold a transaction type."""
    return f"Category '{category_name}' cannot be used for {transaction_type} transactions"


def unsupported_format(file_name: str) -> str:
    """Return message for a statement file with an unknown extension."""
    return f"Format not supported: '{file_name}'. Use .ofx or .csv"
