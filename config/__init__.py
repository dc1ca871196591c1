"""Configuration management module for the community bulletin board."""

from .config_manager import ConfigManager

__all__ = ['ConfigManager']
