"""
Services
Long-lived pipeline objects shared by the API.
"""

from .ratio_feed import RatioFeed, get_ratio_feed

__all__ = ["RatioFeed", "get_ratio_feed"]
