# src/crossbuy/domain/errors.py
"""
Domain Errors - Business Logic Exceptions

This module defines domain-specific exceptions that represent
business rule violations and domain errors. A request boundary maps
every subclass except DuplicateKeyError to a client error.
"""


class DomainError(Exception):
    """Base exception for domain errors."""
    pass


class NotFoundError(DomainError):
    """Raised when a referenced cart line, order, cargo, product or rate is missing."""
    pass


class InvalidInputError(DomainError):
    """Raised when caller input is rejected (empty id list, non-positive quantity, ...)."""
    pass


class InvalidStateError(DomainError):
    """Raised when an operation is not allowed in the current state (empty cart, ...)."""
    pass


class DuplicateKeyError(DomainError):
    """Raised by a store when an insert violates a unique constraint."""
    pass
