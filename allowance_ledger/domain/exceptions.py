"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidInputError(DomainException):
    """Amount, rate, label or date rejected before any state change"""

    pass


class TransactionIndexError(InvalidInputError):
    """Manual transaction index is out of range"""

    def __init__(self, index: int, count: int):
        super().__init__(f"Invalid transaction index {index} (have {count})")
        self.index = index
        self.count = count


class StorageError(DomainException):
    """Account state could not be loaded or saved"""

    pass
