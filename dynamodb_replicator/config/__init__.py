from .config import ReplicatorConfig

__all__ = ["ReplicatorConfig"]
