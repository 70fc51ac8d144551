"""
DynamoDB adapters (store keyed por (id, timestamp)).

Los errores que levantan viven en domain.errors.
"""

from .audit_event_store import DynamoDBAuditEventStore, to_dynamodb_value
from .client import DynamoDBConfig, build_dynamodb_client
from .provisioning import DynamoDBTableProvisioner

__all__ = [
    "DynamoDBAuditEventStore",
    "DynamoDBConfig",
    "DynamoDBTableProvisioner",
    "build_dynamodb_client",
    "to_dynamodb_value",
]
