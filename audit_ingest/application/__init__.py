"""
Application Layer: casos de uso de ingesta de auditoría.
"""
