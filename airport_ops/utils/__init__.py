"""
Configuration and helper utilities.
"""
