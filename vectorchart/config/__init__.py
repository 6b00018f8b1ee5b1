"""Configuration module for vector chart extraction."""

from .extraction_config import ExtractionConfig, DEFAULT_CONFIG

__all__ = ["ExtractionConfig", "DEFAULT_CONFIG"]
