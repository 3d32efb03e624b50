"""
Modreview - multi-provider content moderation review service.
"""
__version__ = "1.0.0"
