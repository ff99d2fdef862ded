"""
schemalang utilities package
"""

from . import config

__all__ = ["config"]
