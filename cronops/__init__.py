"""
cronops - cron expression converter.

Parses five-field cron expressions, describes them in English and predicts
their next fire times. Ships an HTTP API with a registry of named
expressions.
"""

__version__ = "1.0.0"
