"""API routes package"""

from . import users, meals, analyze, health

__all__ = ["users", "meals", "analyze", "health"]
