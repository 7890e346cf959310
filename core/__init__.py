"""Core package: configuration, logging and the inbound message record."""

from core.config_models import RootConfig
from core.message import Message

__all__ = ["Message", "RootConfig"]
