"""Sparsh NFC storefront core"""

__version__ = "1.0.0"
