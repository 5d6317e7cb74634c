"""Userguard: user accounts, credentials, tokens and social identity linking."""

__version__ = "0.1.0"
