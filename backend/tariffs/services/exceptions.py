class TariffError(Exception):
    """Base exception for purchase tariff errors"""
    pass


class TariffValidationError(TariffError):
    """Raised when an edited tariff value is rejected, e.g. a negative amount"""
    pass


class TariffNotFoundError(TariffError):
    """Raised when a carrier, port or tariff referenced by an edit does not exist"""
    pass
