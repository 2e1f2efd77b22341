"""
Configuration module - environment-driven settings shared by every app.
"""

from common.config.base_settings import BaseAppSettings

__all__ = ["BaseAppSettings"]
