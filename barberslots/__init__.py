"""
barberslots - appointment availability engine for a barbershop.
"""

__version__ = "0.1.0"
