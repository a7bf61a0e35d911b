"""Custom exceptions for the bill reconciliation engine."""


class BillReconError(Exception):
    """Base exception for bill reconciliation errors."""

    pass


class ConfigurationError(BillReconError):
    """Error in configuration."""

    pass


class InputParseError(BillReconError):
    """Error reading bills or transactions from an input file."""

    pass


class InvalidTransactionError(BillReconError):
    """Transaction carries neither an id nor content to derive one from."""

    pass


class DateParseError(BillReconError):
    """A date value could not be interpreted as a calendar date."""

    pass
