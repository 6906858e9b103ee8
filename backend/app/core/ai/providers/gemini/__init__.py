"""
Gemini Provider
"""

from .veo import VeoVideoProvider

__all__ = [
    "VeoVideoProvider",
]
