"""
Identity package for the bookshop service.

This package contains:
- Password hashing and verification
- Credential storage with unique usernames
- Signed session token issuance and verification
- The auth gateway that turns an Authorization header into an identity
"""

__version__ = "1.0.0"
