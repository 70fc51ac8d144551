"""
HTTP interface (FastAPI).
"""
