"""
Database module for the Admin Panel API

Contains seed data and database utilities.
"""
from app.db.seed_data import seed_all, clear_all, seed_users

__all__ = ["seed_all", "clear_all", "seed_users"]
