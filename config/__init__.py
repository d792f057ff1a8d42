from .config import CONFIG, Config

__all__ = ["CONFIG", "Config"]
