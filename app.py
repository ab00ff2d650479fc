# app.py
"""
Thin entrypoint for the API.

Usage example:
    uvicorn app:app --reload
"""

from keyledger.main import app  # re-export FastAPI instance
