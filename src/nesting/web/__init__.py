"""FastAPI REST API for sheet nesting.

This module provides a REST API for packing parts onto stock sheets and
validating packing requests.

Usage:
    uvicorn nesting.web:app --reload
"""

from nesting.web.app import app, create_app

__all__ = ["app", "create_app"]
