from .context import get_log_context, log_context, new_request_id
from .setup import configure_logging

__all__ = ["configure_logging", "get_log_context", "log_context", "new_request_id"]
