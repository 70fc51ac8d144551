"""
Infrastructure Layer: adapters de DynamoDB e implementaciones in-memory.
"""
