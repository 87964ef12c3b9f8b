# backend/modules/seating/config/__init__.py

from .seating_config import SeatingConfig, get_seating_config

__all__ = ["SeatingConfig", "get_seating_config"]
