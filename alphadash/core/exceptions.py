class AlphaDashError(Exception):
    """Base class for all alpha-dash exceptions."""


class ConfigError(AlphaDashError):
    """Raised for missing/malformed configuration."""


class ProviderError(AlphaDashError):
    """Raised when a dataset source fails or returns an unusable response."""


class DatasetNotFoundError(ProviderError):
    """Raised when the requested dataset file does not exist in the source."""


class DataValidationError(AlphaDashError):
    """Raised when a loaded dataset or model metadata fails schema validation."""


__all__ = [
    "AlphaDashError",
    "ConfigError",
    "ProviderError",
    "DatasetNotFoundError",
    "DataValidationError",
]
