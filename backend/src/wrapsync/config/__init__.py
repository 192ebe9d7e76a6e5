from .settings import ConfigurationError, ServerSettings

__all__ = ["ConfigurationError", "ServerSettings"]
