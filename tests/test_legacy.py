"""Tests for legacy flat process schemas: validation, extraction, ballots, signatures."""
import base64
import json
import logging

import pytest

from schema_engine.legacy import (
    DEFAULT_LEGACY_HANDLER,
    LEGACY_HANDLERS,
    create_schema_signature,
    detect_legacy_schema_type,
    extract_proposal_config,
    extract_supported_properties,
    extract_voting_config,
    is_valid_decision_process_schema,
    process_legacy_schema,
    validate_schema_compatibility,
    validate_schema_structure,
    validate_vote_selection,
)


class TestTypeGuard:
    def test_valid_with_elector_cap(self, legacy_schema_factory):
        assert is_valid_decision_process_schema(legacy_schema_factory())

    def test_valid_with_member_cap(self):
        data = {"allowProposals": False, "allowDecisions": True, "instanceData": {"maxVotesPerMember": 2}}
        assert is_valid_decision_process_schema(data)

    @pytest.mark.parametrize("data", [
        None,
        "schema",
        [],
        {},
        {"allowProposals": "yes", "allowDecisions": True, "instanceData": {"maxVotesPerElector": 1}},
        {"allowProposals": True, "allowDecisions": True},
        {"allowProposals": True, "allowDecisions": True, "instanceData": {}},
        {"allowProposals": True, "allowDecisions": True, "instanceData": {"maxVotesPerElector": -1}},
        {"allowProposals": True, "allowDecisions": True, "instanceData": {"maxVotesPerElector": True}},
        {"allowProposals": True, "allowDecisions": True, "instanceData": {"maxVotesPerElector": 2.5}},
        {"allowProposals": True, "allowDecisions": True,
         "instanceData": {"maxVotesPerElector": 3, "maxVotesPerMember": "3"}},
    ])
    def test_invalid_shapes(self, data):
        assert not is_valid_decision_process_schema(data)


class TestValidateSchemaStructure:
    def test_valid(self, legacy_schema_factory):
        result = validate_schema_structure(legacy_schema_factory(budget=1000))
        assert result.is_valid is True
        assert result.schema_type == "simple"
        assert result.errors == []
        assert result.supported_properties == [
            "allowProposals", "allowDecisions", "instanceData", "schemaType", "budget",
        ]

    def test_valid_without_schema_type(self, legacy_schema_factory):
        result = validate_schema_structure(legacy_schema_factory(schema_type=None))
        assert result.is_valid is True
        assert result.schema_type == "unknown"

    @pytest.mark.parametrize("data", [
        None,
        {"allowProposals": True},
        {"allowProposals": 1, "allowDecisions": True, "instanceData": {"maxVotesPerElector": 3}},
        {"allowProposals": True, "allowDecisions": True, "instanceData": {"maxVotesPerElector": "3"}},
        {"allowProposals": True, "allowDecisions": True, "instanceData": {"other": 1}},
    ])
    def test_invalid_collapses_to_single_error(self, data):
        result = validate_schema_structure(data)
        assert result.is_valid is False
        assert result.schema_type == "invalid"
        assert len(result.errors) == 1
        assert result.supported_properties == []

    def test_supported_properties_base_keys_first(self):
        data = {"extra": 1, "instanceData": {}, "allowDecisions": True, "allowProposals": True}
        assert extract_supported_properties(data) == [
            "allowProposals", "allowDecisions", "instanceData", "extra",
        ]


class TestExtractVotingConfig:
    def test_reads_both_cap_names_verbatim(self):
        data = {
            "allowProposals": True,
            "allowDecisions": False,
            "instanceData": {"maxVotesPerElector": 3, "maxVotesPerMember": 4},
        }
        config = extract_voting_config(data)
        assert config.max_votes_per_elector == 3
        assert config.max_votes_per_member == 4
        assert config.allow_decisions is False
        assert config.schema_type == "unknown"
        assert config.additional_config is None

    def test_extra_keys_become_additional_config(self, legacy_schema_factory):
        config = extract_voting_config(legacy_schema_factory(region="emea"), "simple")
        assert config.additional_config == {"schemaType": "simple", "region": "emea"}

    def test_advanced_overlay(self, legacy_schema_factory):
        data = legacy_schema_factory("advanced", advancedVotingConfig={"weightedVoting": True})
        config = extract_voting_config(data, "advanced")
        assert config.additional_config["weightedVoting"] is True

    def test_advanced_overlay_ignored_for_other_types(self, legacy_schema_factory):
        data = legacy_schema_factory("simple", advancedVotingConfig={"weightedVoting": True})
        config = extract_voting_config(data, "simple")
        assert "weightedVoting" not in config.additional_config


class TestExtractProposalConfig:
    def test_base_config(self, legacy_schema_factory):
        config = extract_proposal_config(legacy_schema_factory(), "simple")
        assert config.required_fields == ["title", "description"]
        assert config.optional_fields == ["amount", "category", "schemaSpecificData"]
        assert set(config.field_constraints) == {"title", "description", "amount", "category"}
        assert config.allow_proposals is True

    def test_advanced_union_dedupes(self, legacy_schema_factory):
        data = legacy_schema_factory("advanced", advancedProposalConfig={
            "requiredFields": ["title", "budget"],
            "optionalFields": ["tags", "amount"],
            "fieldConstraints": {"budget": {"type": "number", "min": 100}},
        })
        config = extract_proposal_config(data, "advanced")
        assert config.required_fields == ["title", "description", "budget"]
        assert config.optional_fields == ["amount", "category", "schemaSpecificData", "tags"]
        assert config.field_constraints["budget"] == {"type": "number", "min": 100}
        assert config.field_constraints["title"]["maxLength"] == 200

    def test_advanced_overlay_ignored_for_simple(self, legacy_schema_factory):
        data = legacy_schema_factory("simple", advancedProposalConfig={"requiredFields": ["budget"]})
        assert extract_proposal_config(data, "simple").required_fields == ["title", "description"]

    def test_generic_overlay_applies_to_every_type(self, legacy_schema_factory):
        data = legacy_schema_factory("simple", proposalConfig={
            "requiredFields": ["summary"],
            "fieldConstraints": {"summary": {"type": "string", "maxLength": 500}},
        })
        config = extract_proposal_config(data, "simple")
        assert config.required_fields == ["title", "description", "summary"]
        assert config.field_constraints["summary"]["maxLength"] == 500

    def test_non_list_overlay_fields_ignored(self, legacy_schema_factory):
        data = legacy_schema_factory("advanced", advancedProposalConfig={"requiredFields": "budget"})
        assert extract_proposal_config(data, "advanced").required_fields == ["title", "description"]


class TestValidateVoteSelection:
    def test_empty_selection(self):
        result = validate_vote_selection([], 3, ["a", "b"])
        assert result.is_valid is False
        assert result.errors == ["At least one proposal must be selected"]

    def test_duplicate_ids(self):
        result = validate_vote_selection(["a", "a"], 3, ["a", "b"])
        assert result.is_valid is False
        assert result.errors == ["Duplicate proposal IDs: a"]

    def test_accumulates_every_error(self):
        result = validate_vote_selection(["a", "c", "d", "c"], 3, ["a", "b"])
        assert result.errors == [
            "Cannot select more than 3 proposals",
            "Invalid proposal IDs: c, d, c",
            "Duplicate proposal IDs: c",
        ]

    def test_valid_selection(self):
        result = validate_vote_selection(["a", "b"], 2, ["a", "b", "c"])
        assert result.is_valid is True
        assert result.errors == []


class TestSchemaSignature:
    def test_ignores_unrelated_keys(self, legacy_schema_factory):
        first = legacy_schema_factory(region="emea")
        second = legacy_schema_factory(region="apac", notes={"x": 1})
        assert create_schema_signature(first) == create_schema_signature(second)

    def test_changes_with_voting_fields(self, legacy_schema_factory):
        assert create_schema_signature(legacy_schema_factory(max_votes_per_elector=3)) != \
            create_schema_signature(legacy_schema_factory(max_votes_per_elector=4))

    def test_encoding(self, legacy_schema_factory):
        decoded = base64.b64decode(create_schema_signature(legacy_schema_factory()))
        assert decoded == b'{"allowProposals":true,"allowDecisions":true,"maxVotesPerElector":3}'

    def test_absent_values_omitted(self):
        data = {"allowProposals": False, "allowDecisions": True, "instanceData": {"maxVotesPerMember": 2}}
        decoded = json.loads(base64.b64decode(create_schema_signature(data)))
        assert decoded == {"allowProposals": False, "allowDecisions": True}

    def test_explicit_null_kept(self):
        data = {"allowProposals": True, "allowDecisions": True, "instanceData": {"maxVotesPerElector": None}}
        decoded = base64.b64decode(create_schema_signature(data))
        assert decoded == b'{"allowProposals":true,"allowDecisions":true,"maxVotesPerElector":null}'

    def test_null_differs_from_absent(self):
        with_null = {"allowProposals": True, "allowDecisions": True, "instanceData": {"maxVotesPerElector": None}}
        absent = {"allowProposals": True, "allowDecisions": True, "instanceData": {}}
        assert create_schema_signature(with_null) != create_schema_signature(absent)


class TestSchemaCompatibility:
    def test_compatible(self, legacy_schema_factory):
        result = validate_schema_compatibility(legacy_schema_factory(), ["allowProposals", "instanceData"])
        assert result.is_compatible is True
        assert result.missing_properties == []

    def test_missing(self, legacy_schema_factory):
        result = validate_schema_compatibility(legacy_schema_factory(), ["allowProposals", "budget", "phases"])
        assert result.is_compatible is False
        assert result.missing_properties == ["budget", "phases"]


class TestLegacyHandlers:
    def test_tagged_handlers_require_matching_type(self, legacy_schema_factory):
        assert LEGACY_HANDLERS["simple"].validate(legacy_schema_factory("simple"))
        assert not LEGACY_HANDLERS["simple"].validate(legacy_schema_factory("advanced"))
        assert not LEGACY_HANDLERS["advanced"].validate(legacy_schema_factory(schema_type=None))

    def test_default_handler_accepts_any_valid_shape(self, legacy_schema_factory):
        assert DEFAULT_LEGACY_HANDLER.validate(legacy_schema_factory("whatever"))
        assert not DEFAULT_LEGACY_HANDLER.validate({"allowProposals": True})

    def test_handler_extractors_bound_to_type(self, legacy_schema_factory):
        data = legacy_schema_factory("advanced", advancedVotingConfig={"quorum": 50})
        config = LEGACY_HANDLERS["advanced"].extract_voting_config(data)
        assert config.schema_type == "advanced"
        assert config.additional_config["quorum"] == 50

    def test_detect_legacy_schema_type(self, legacy_schema_factory):
        assert detect_legacy_schema_type(legacy_schema_factory("custom")) == "custom"
        assert detect_legacy_schema_type(legacy_schema_factory(schema_type=None)) == "default"
        assert detect_legacy_schema_type({"allowProposals": True}) == "unknown"


class TestProcessLegacySchema:
    def test_valid_simple(self, legacy_schema_factory):
        result = process_legacy_schema(legacy_schema_factory("simple"))
        assert result.is_valid is True
        assert result.schema_type == "simple"
        assert result.voting_config.max_votes_per_elector == 3
        assert result.voting_config.schema_type == "simple"
        assert result.proposal_config.schema_type == "simple"
        assert result.validation_result.is_valid is True

    def test_valid_advanced(self, legacy_schema_factory):
        data = legacy_schema_factory(
            "advanced",
            advancedVotingConfig={"allowDelegation": True},
            advancedProposalConfig={"requiredFields": ["budget"]},
        )
        result = process_legacy_schema(data)
        assert result.voting_config.additional_config["allowDelegation"] is True
        assert result.proposal_config.required_fields == ["title", "description", "budget"]

    def test_unregistered_type_uses_default_handler(self, legacy_schema_factory):
        result = process_legacy_schema(legacy_schema_factory("custom"))
        assert result.is_valid is True
        assert result.schema_type == "custom"
        assert result.voting_config.schema_type == "default"

    def test_malformed_short_circuits(self, caplog):
        with caplog.at_level(logging.INFO, logger="schema_engine.legacy"):
            result = process_legacy_schema({"allowProposals": "yes"})

        assert result.is_valid is False
        assert result.schema_type == "unknown"
        assert result.voting_config is None
        assert result.proposal_config is None
        assert result.validation_result.schema_type == "invalid"
        assert len(result.validation_result.errors) == 1
        assert "Legacy schema rejected" in caplog.text

    def test_not_a_mapping(self):
        result = process_legacy_schema(["allowProposals"])
        assert result.is_valid is False
        assert result.voting_config is None
