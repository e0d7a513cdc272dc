"""
Configuration package: environment-backed settings and constants.
"""
