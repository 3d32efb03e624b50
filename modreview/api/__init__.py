"""
HTTP API for the review dashboard.
"""
