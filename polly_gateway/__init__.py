"""Polly gateway: identity, session and ownership checks for the Polly app."""

__version__ = "0.1.0"
