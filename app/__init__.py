"""
Alumni Records Service
Alumni profiles and their employment history, with a recoverable trash.

Architecture:
- PostgreSQL or MongoDB: one record store, chosen at startup
- Local disk: uploaded photos and certificates
- JWT authentication with admin / user roles
"""

__version__ = "1.0.0"
