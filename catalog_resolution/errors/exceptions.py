"""Custom exception hierarchy for catalog resolution configuration errors.

Matching and classification operations are total and never raise; these
exceptions are only raised while rule and brand tables are being loaded.
"""


class CatalogResolutionError(Exception):
    """Base exception for all catalog resolution errors."""
    
    def __init__(self, message: str, *args, **kwargs):
        """Initialize error with message."""
        self.message = message
        super().__init__(message, *args, **kwargs)


class RuleConfigurationError(CatalogResolutionError):
    """Raised when a classification rule table cannot be compiled."""
    pass


class BrandTableError(CatalogResolutionError):
    """Raised when a brand alias/parent table is unreadable or inconsistent."""
    pass
