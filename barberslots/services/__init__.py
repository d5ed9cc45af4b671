"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .availability import AvailabilityService, ShopDataSource

__all__ = ["AvailabilityService", "ShopDataSource"]
