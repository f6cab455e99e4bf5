"""Domain-specific errors for switchyard."""


class SwitchyardError(Exception):
    """Base error for switchyard."""


class ConfigLoadError(SwitchyardError):
    """Raised when the config file cannot be read or parsed."""


class ConfigValidationError(SwitchyardError):
    """Raised when a config document does not conform to schema."""


class ConfigSaveError(SwitchyardError):
    """Raised when writing the config file fails."""


class ConditionValidationError(SwitchyardError):
    """Raised when a condition pattern is not valid for its type."""


class RuleValidationError(SwitchyardError):
    """Raised when a rule cannot be stored as edited."""


class BrowserNotFoundError(SwitchyardError):
    """Raised when a browser id does not resolve to a discovered browser."""


class LaunchError(SwitchyardError):
    """Raised when a browser process cannot be started."""


class DefaultBrowserError(SwitchyardError):
    """Raised when querying or changing the desktop default browser fails."""


class NothingToRouteError(SwitchyardError):
    """Raised when an incoming URL is empty after sanitizing."""
