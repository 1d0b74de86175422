"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class PeriodNotFoundError(DomainException):
    """Requested budget period does not exist"""

    def __init__(self, period_id):
        self.period_id = period_id
        super().__init__(f"Budget period not found: {period_id}")


class InvalidConfigurationError(DomainException):
    """Payday settings are outside the supported range"""

    pass


class InvalidTemplateError(DomainException):
    """Template allocation is malformed"""

    pass


class TemplateNotFoundError(DomainException):
    """No built-in template matches the requested id"""

    pass
