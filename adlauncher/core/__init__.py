"""
Core module - Configuration and observability
"""

from .config import Config

__all__ = ['Config']
