"""
Waypoint - Result values with errors that trace their own propagation path.

- waypoint.core: outcomes, traced errors, propagation, program edge
"""

__version__ = "0.1.0"

# Re-export everything from the actual implementation
from waypoint.core import *  # noqa
