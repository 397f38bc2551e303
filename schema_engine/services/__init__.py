"""
schema_engine/services — registries built once at startup and passed around.
"""

from schema_engine.services.legacy_registry import SchemaRegistry
from schema_engine.services.voting_registry import VotingSchemaRegistry, create_voting_registry

__all__ = ["SchemaRegistry", "VotingSchemaRegistry", "create_voting_registry"]
