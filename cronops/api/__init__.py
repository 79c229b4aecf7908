"""
HTTP API for the cron expression converter.
"""
