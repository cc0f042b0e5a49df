from .config import RuntimeConfig, load_runtime_config
from .runtime import Runtime, SubscriberFn, create_runtime

__all__ = [
    "Runtime",
    "RuntimeConfig",
    "SubscriberFn",
    "create_runtime",
    "load_runtime_config",
]
