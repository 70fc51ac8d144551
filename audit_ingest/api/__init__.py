"""
Hosted HTTP service (FastAPI app + exception handlers).
"""
