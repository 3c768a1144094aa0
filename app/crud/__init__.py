"""
CRUD operations (Create, Read, Update, Delete) for database models.

This layer keeps query code out of the API routes and services.
"""

from app.crud import app_setting, candidate, interview

__all__ = ["app_setting", "candidate", "interview"]
