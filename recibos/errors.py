"""Domain-specific exceptions for receipt issuance and verification."""


class ReceiptError(Exception):
    """Base exception for receipt services."""
    code = "INTERNAL_ERROR"


class ReceiptValidationError(ReceiptError):
    """Raised when one or more receipt fields are missing or malformed."""
    code = "VALIDATION_ERROR"

    def __init__(self, errors: list[str]):
        super().__init__("; ".join(errors))
        self.errors = list(errors)


class ReceiptNotFoundError(ReceiptError):
    """Raised when no receipt exists for a number or share id."""
    code = "NOT_FOUND"


class HashMissingError(ReceiptError):
    """Raised when a stored receipt has no fingerprint."""
    code = "HASH_MISSING"


class StoreUnavailableError(ReceiptError):
    """Raised when the receipt store cannot be read or written."""
    code = "INTERNAL_ERROR"


class PaymentCodeError(ReceiptError):
    """Raised when a PIX payment code cannot be built from its inputs."""
    code = "VALIDATION_ERROR"
