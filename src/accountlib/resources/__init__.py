from .client import DEFAULT_BASE_URL, DEFAULT_RESOURCE_PATH, ResourceClient
from .schemas import DataEnvelope, ResourceData

__all__ = ["ResourceClient", "ResourceData", "DataEnvelope", "DEFAULT_BASE_URL", "DEFAULT_RESOURCE_PATH"]
