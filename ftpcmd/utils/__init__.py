"""Utility module for ftpcmd.

- Logging setup with secret redaction
- Input validators
"""
