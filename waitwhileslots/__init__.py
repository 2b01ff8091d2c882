"""
waitwhileslots - Waitwhile opening hours and booking slots.
"""

__version__ = "0.1.0"
