"""
Client-side cart state.
"""

from .cart_state import CartState, CartSummary

__all__ = ["CartState", "CartSummary"]
