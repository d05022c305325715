"""
salonslots - resolve bookable appointment times for a hair salon.
"""

__version__ = "0.1.0"
