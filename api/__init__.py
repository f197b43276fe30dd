"""
FastAPI RESTful API for the Bookshop Review service.

This module provides a REST API for:
- Book catalog browsing and search
- User registration and login
- Bearer-token protected review management
"""
