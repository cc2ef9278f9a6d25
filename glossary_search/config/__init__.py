"""Configuration management for the glossary search service."""

from .settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
