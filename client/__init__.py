"""
Async HTTP client for the bookshop API.
"""
