"""
Audit event ingestion pipeline (hosted FastAPI service + AWS Lambda handlers).
"""

__version__ = "0.1.0"
