"""
ForsaLink
A job board connecting students and companies.

Architecture:
- FastAPI REST layer, one router per resource
- PostgreSQL accessed with raw parameterized SQL (SQLAlchemy text())
- JWT bearer auth for students and companies
"""

__version__ = "1.0.0"
