"""
Bond calculation errors

Errors carry a kind; the HTTP layer maps kinds to status codes.
"""
from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorKind(str, Enum):
    """Category of a failure"""
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    NOT_FOUND = "not_found"
    INTERNAL = "internal"


class BondCalculationException(Exception):
    """Valid-looking input that could not be processed"""
    kind = ErrorKind.BUSINESS_RULE
    error = "Bond Calculation Error"

    def __init__(
        self,
        message: str,
        errors: Optional[List[Dict[str, Any]]] = None,
        kind: Optional[ErrorKind] = None
    ):
        super().__init__(message)
        self.message = message
        self.errors = errors
        if kind is not None:
            self.kind = kind


class InvalidBondDataException(BondCalculationException):
    """Malformed bond data detected outside request validation"""
    kind = ErrorKind.VALIDATION


class BondNotFoundException(BondCalculationException):
    kind = ErrorKind.NOT_FOUND

    def __init__(self, identifier: str):
        super().__init__(f'Bond with identifier "{identifier}" not found')
        self.identifier = identifier
