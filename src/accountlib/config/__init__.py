from .loader import ClientConfig, LoggingSettings, RetrySettings, TransportSettings, load_config

__all__ = ["ClientConfig", "LoggingSettings", "RetrySettings", "TransportSettings", "load_config"]
