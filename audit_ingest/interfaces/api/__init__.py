"""
API interfaces.
"""
