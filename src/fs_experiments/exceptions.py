"""
Custom exceptions for the experiment cookie system.
"""


class ExperimentError(Exception):
    """Base class for all experiment errors."""
    pass


class TemplateError(ExperimentError):
    """Raised when a feature template has an invalid shape."""
    pass


class TemplateRegistryClosedError(ExperimentError):
    """Raised when templates are supplied after the cookie was decoded."""
    pass


class RegistrationClosedError(ExperimentError):
    """Raised when a dialog component is registered after startup completed."""
    pass


class ConfigurationError(ExperimentError):
    """Raised for unreadable or invalid configuration files."""
    pass


class MalformedRecordError(ExperimentError):
    """Raised by the record parser. Never escapes the codec."""
    pass
