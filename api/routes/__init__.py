"""API routes package"""

from . import products, notifications, health

__all__ = ["products", "notifications", "health"]
