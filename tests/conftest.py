"""
Shared fixtures for schema engine tests.

Registries are built fresh per test; nothing here touches process-wide state.
"""
import pytest

from schema_engine.config import EngineSettings
from schema_engine.services.legacy_registry import SchemaRegistry
from schema_engine.services.voting_registry import create_voting_registry


@pytest.fixture
def settings():
    return EngineSettings()


@pytest.fixture
def voting_registry(settings):
    return create_voting_registry(settings)


@pytest.fixture
def legacy_registry(voting_registry, settings):
    return SchemaRegistry(voting_registry, settings)


@pytest.fixture
def legacy_schema_factory():
    """Factory for legacy flat process schemas; keyword overrides go on top."""
    def _make(schema_type="simple", max_votes_per_elector=3, **extra):
        data = {
            "allowProposals": True,
            "allowDecisions": True,
            "instanceData": {"maxVotesPerElector": max_votes_per_elector},
        }
        if schema_type is not None:
            data["schemaType"] = schema_type
        data.update(extra)
        return data
    return _make


@pytest.fixture
def rubric_template():
    """Three criteria: two scored integers and one free-text comment box."""
    return {
        "type": "object",
        "properties": {
            "comments": {"type": "string", "title": "Comments", "x-format": "long-text"},
            "innovation": {
                "type": "integer",
                "title": "Innovation",
                "maximum": 5,
                "x-format": "dropdown",
            },
            "feasibility": {"type": "integer", "maximum": 10},
        },
        "x-field-order": ["innovation", "feasibility"],
    }
