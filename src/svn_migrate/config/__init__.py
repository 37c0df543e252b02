"""Configuration management."""

from .config import Config, LoggingConfig

__all__ = ['Config', 'LoggingConfig']
