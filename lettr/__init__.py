"""
lettr – creator newsletter core.
This module groups the traffic classification, engagement tracking
and content fidelity scoring used by the newsletter platform.
"""

__version__ = "0.1.0"
