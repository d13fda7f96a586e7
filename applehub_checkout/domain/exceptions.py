"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidInstallmentError(DomainException):
    """Installment inputs are out of range (count < 1, negative principal or rate)"""

    pass


class InvalidPricingInputError(DomainException):
    """Order amounts are negative or the discount exceeds the purchase base"""

    pass


class InstallmentsNotAllowedError(DomainException):
    """Financing is disabled or the order does not meet the installment settings"""

    pass


class InvalidCepError(DomainException):
    """Postal code is not 8 digits"""

    pass


class EdgeFunctionError(DomainException):
    """External edge function returned an error or is unavailable"""

    pass
