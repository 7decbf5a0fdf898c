"""
Configuration and validation helpers.
"""
