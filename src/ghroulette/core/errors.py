class ConfigError(RuntimeError):
    """Configuration validation or loading error."""
