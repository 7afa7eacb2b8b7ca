"""Custom exceptions used across CellSwap."""


class CellSwapError(Exception):
    """Base error for the application."""

    kind = "CellSwapError"
    status_code = 500


class ConfigError(CellSwapError):
    """Configuration related error."""

    kind = "ConfigError"


class MissingInput(CellSwapError):
    """Raised when a required target or replacement payload is absent."""

    kind = "MissingInput"
    status_code = 400


class DecodeFailure(CellSwapError):
    """Raised when a workbook payload cannot be parsed."""

    kind = "DecodeFailure"
    status_code = 422


class EncodeFailure(CellSwapError):
    """Raised when a mutated workbook cannot be serialized again."""

    kind = "EncodeFailure"


class BundleFailure(CellSwapError):
    """Raised when the output archive cannot be assembled."""

    kind = "BundleFailure"


class Unauthorized(CellSwapError):
    """Raised when a submitted credential does not match the configured secret."""

    kind = "Unauthorized"
    status_code = 401
