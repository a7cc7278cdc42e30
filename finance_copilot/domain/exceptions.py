"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidParameterError(DomainException):
    """Caller supplied a parameter outside its accepted range"""

    pass


class RecordStoreError(DomainException):
    """Record store failed to return the requested records"""

    def __init__(self, entity: str, reason: str):
        super().__init__(f"Failed to fetch {entity}: {reason}")
        self.entity = entity


class MetricComputationError(DomainException):
    """A public analytics operation failed; message summarises the whole chain"""

    def __init__(self, operation: str, reason: str):
        super().__init__(f"Failed to {operation}: {reason}")
        self.operation = operation

    @property
    def upstream_failure(self) -> bool:
        """True when the root cause was a record store read"""
        cause = self.__cause__
        while cause is not None:
            if isinstance(cause, RecordStoreError):
                return True
            cause = cause.__cause__
        return False
