"""
Trailstats

Track geometry and elevation statistics for trail maps.
"""

__version__ = "0.1.0"
