"""
Person Service - HTTP API and stream consumer for Person records
"""

__version__ = "1.0.0"
