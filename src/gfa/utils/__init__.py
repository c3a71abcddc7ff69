"""
Utility helpers for paths and dates.
"""
