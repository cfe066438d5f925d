"""Custom exceptions for the portfolio view aggregator."""


class PortfolioViewException(Exception):
    """Base exception for all portfolio view errors."""
    pass


class ValidationError(PortfolioViewException):
    """Raised when input validation fails."""

    def __init__(self, message: str, data=None):
        super().__init__(message)
        self.data = data


class CatalogError(PortfolioViewException):
    """Raised when the asset catalog cannot be loaded or is malformed."""

    def __init__(self, message: str, source=None):
        super().__init__(message)
        self.source = source


class HistoryAlignmentError(ValidationError):
    """Raised when an asset's history does not cover the reference dates."""

    def __init__(self, message: str, ticker=None, missing_dates=None):
        super().__init__(message, data=missing_dates)
        self.ticker = ticker
        self.missing_dates = list(missing_dates or [])


class PortfolioConfigError(PortfolioViewException):
    """Raised when a portfolio configuration file is invalid."""

    def __init__(self, message: str, portfolio_data=None):
        super().__init__(message)
        self.portfolio_data = portfolio_data
