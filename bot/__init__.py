"""Bot package - Discord client wiring for the smart responder."""
from .client import SmartBot

__all__ = ["SmartBot"]
