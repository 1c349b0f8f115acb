"""
Container Resources - Declarative image tag and secret lifecycle

Tracks the registry digest behind an image tag, keeps the matching local
image pulled, prunes superseded copies, and manages immutable runtime
secrets.
"""

__version__ = "0.1.0"
__author__ = "Systems Engineering Portfolio"
