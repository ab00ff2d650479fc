# keyledger/__init__.py
"""
KeyLedger: invoicing back end for a locksmith shop.

This lets us run:
    uvicorn keyledger:app --reload
"""

from .main import app

__all__ = ["app"]
