"""
Scrap land operations.
"""

from .lands import LandManager, recompute_land_tonnage

__all__ = ["LandManager", "recompute_land_tonnage"]
