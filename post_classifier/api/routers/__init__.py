"""
API Routers package.
"""

from . import analysis, dedup, post_groups

__all__ = ["analysis", "dedup", "post_groups"]
