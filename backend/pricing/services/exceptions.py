class PricingError(Exception):
    """Base exception for pricing related errors"""
    pass


class ConfigurationError(PricingError):
    """Raised when pricing or VAT settings are missing or malformed"""
    pass


class RuleResolutionError(PricingError):
    """Raised when a margin rule or pricing profile cannot be applied to an article"""
    pass
