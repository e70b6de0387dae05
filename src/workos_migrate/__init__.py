"""WorkOS Migration Tool

Copies users, organizations, credentials and two-factor settings from a
WorkOS account into a better-auth database.
"""

__version__ = '0.1.0'
