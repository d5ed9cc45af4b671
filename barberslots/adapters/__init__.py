"""
Adapters layer - External data sources (config and appointment files).
"""

from .appointment_file import FileShopDataSource, parse_appointment

__all__ = ["FileShopDataSource", "parse_appointment"]
