"""Configuration errors."""


class ConfigError(Exception):
    """Raised when arguments, config or settings are malformed or unreadable."""
