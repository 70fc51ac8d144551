"""
Interfaces Layer: adaptadores de entrada (HTTP hosteado + entrada compartida).
"""

from .ingestion import IngestionResponse, handle_ingestion, present_result

__all__ = ["IngestionResponse", "handle_ingestion", "present_result"]
