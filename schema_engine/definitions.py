"""
Built-in schema definitions.

Voting definitions (simple / advanced / default) configure how members vote
and are loaded into every registry created by create_voting_registry().
Decision templates describe whole phase-based processes.

Bindings marked transform='stateConfig' target per-state config
('states.$.config.*') and are applied by the process-instance layer, not by
the Binding Processor.
"""

from schema_engine.schemas import DecisionSchemaDefinition, SchemaType, VotingSchemaDefinition

STATE_CONFIG_TRANSFORM = "stateConfig"

_MAX_VOTES_FIELD = {
    "type": "number",
    "title": "Maximum Votes Per Member",
    "description": "How many proposals can each member vote for?",
    "minimum": 1,
    "errorMessage": {"minimum": "Must be 1 or more"},
}

_BASE_UI_SCHEMA = {
    "maxVotesPerMember": {"ui:widget": "number", "ui:placeholder": "5"},
    "allowProposals": {"ui:widget": "checkbox"},
    "allowDecisions": {"ui:widget": "checkbox"},
}

_BASE_BINDINGS = {
    "maxVotesPerMember": {"target": "instanceData.fieldValues.maxVotesPerMember"},
    "allowProposals": {"target": "states.$.config.allowProposals", "transform": STATE_CONFIG_TRANSFORM},
    "allowDecisions": {"target": "states.$.config.allowDecisions", "transform": STATE_CONFIG_TRANSFORM},
}


# ---------------------------------------------------------------------------
# Voting schema definitions
# ---------------------------------------------------------------------------

SIMPLE_SCHEMA = VotingSchemaDefinition.model_validate({
    "schemaType": SchemaType.SIMPLE.value,
    "name": "Simple Voting",
    "description": "Basic approval voting where members can vote for multiple proposals up to a limit.",
    "formSchema": {
        "type": "object",
        "title": "Configure Voting Settings",
        "description": "Set up how members will participate in the voting process.",
        "required": ["maxVotesPerMember"],
        "properties": {
            "maxVotesPerMember": _MAX_VOTES_FIELD,
            "allowProposals": {
                "type": "boolean",
                "title": "Allow Proposals",
                "description": "Enable members to submit proposals during this phase.",
            },
            "allowDecisions": {
                "type": "boolean",
                "title": "Allow Voting",
                "description": "Enable members to vote on proposals during this phase.",
            },
        },
    },
    "uiSchema": _BASE_UI_SCHEMA,
    "defaults": {"maxVotesPerMember": 3, "allowProposals": True, "allowDecisions": True},
    "bindings": _BASE_BINDINGS,
})

ADVANCED_SCHEMA = VotingSchemaDefinition.model_validate({
    "schemaType": SchemaType.ADVANCED.value,
    "name": "Advanced Voting",
    "description": "Advanced voting with weighted votes, delegation, and quorum requirements.",
    "formSchema": {
        "type": "object",
        "title": "Configure Advanced Voting Settings",
        "description": "Set up advanced voting options including weights, delegation, and quorum.",
        "required": ["maxVotesPerMember"],
        "properties": {
            "maxVotesPerMember": _MAX_VOTES_FIELD,
            "allowProposals": {
                "type": "boolean",
                "title": "Allow Proposals",
                "description": "Enable members to submit proposals during this phase.",
            },
            "allowDecisions": {
                "type": "boolean",
                "title": "Allow Voting",
                "description": "Enable members to vote on proposals during this phase.",
            },
            "weightedVoting": {
                "type": "boolean",
                "title": "Enable Weighted Voting",
                "description": "Allow votes to have different weights based on member roles or token holdings.",
            },
            "allowDelegation": {
                "type": "boolean",
                "title": "Allow Vote Delegation",
                "description": "Allow members to delegate their voting power to others.",
            },
            "quorumPercentage": {
                "type": "number",
                "title": "Quorum Percentage",
                "description": "Minimum percentage of eligible voters required to participate for the vote to be valid.",
                "minimum": 0,
                "maximum": 100,
                "errorMessage": {"minimum": "Must be 0 or more", "maximum": "Cannot exceed 100"},
            },
        },
    },
    "uiSchema": {
        **_BASE_UI_SCHEMA,
        "weightedVoting": {"ui:widget": "checkbox"},
        "allowDelegation": {"ui:widget": "checkbox"},
        "quorumPercentage": {"ui:widget": "number", "ui:placeholder": "50", "ui:options": {"suffix": "%"}},
    },
    "defaults": {
        "maxVotesPerMember": 5,
        "allowProposals": True,
        "allowDecisions": True,
        "weightedVoting": False,
        "allowDelegation": False,
        "quorumPercentage": None,
    },
    "bindings": {
        **_BASE_BINDINGS,
        "weightedVoting": {"target": "instanceData.fieldValues.weightedVoting"},
        "allowDelegation": {"target": "instanceData.fieldValues.allowDelegation"},
        "quorumPercentage": {"target": "instanceData.fieldValues.quorumPercentage"},
    },
})

DEFAULT_SCHEMA = VotingSchemaDefinition.model_validate({
    "schemaType": SchemaType.DEFAULT.value,
    "name": "Default Voting",
    "description": "Standard voting configuration.",
    "formSchema": {
        "type": "object",
        "title": "Configure Voting Settings",
        "required": ["maxVotesPerMember"],
        "properties": {
            "maxVotesPerMember": {
                "type": "number",
                "title": "Maximum Votes Per Member",
                "description": "How many proposals can each member vote for?",
                "minimum": 1,
            },
            "allowProposals": {"type": "boolean", "title": "Allow Proposals"},
            "allowDecisions": {"type": "boolean", "title": "Allow Voting"},
        },
    },
    "uiSchema": _BASE_UI_SCHEMA,
    "defaults": {"maxVotesPerMember": 3, "allowProposals": True, "allowDecisions": True},
    "bindings": _BASE_BINDINGS,
})

VOTING_SCHEMA_DEFINITIONS: list[VotingSchemaDefinition] = [
    SIMPLE_SCHEMA,
    ADVANCED_SCHEMA,
    DEFAULT_SCHEMA,
]


# ---------------------------------------------------------------------------
# Phase-based decision templates
# ---------------------------------------------------------------------------

def _budget_settings(**extra_properties) -> dict:
    properties = {
        "budget": {
            "type": "number",
            "title": "Budget",
            "description": "Total budget available for this decision process",
            "minimum": 0,
        },
        **extra_properties,
    }
    return {
        "type": "object",
        "properties": properties,
        "ui": {"budget": {"ui:widget": "number", "ui:placeholder": "100000"}},
    }


# submission → review → voting → results
SIMPLE_VOTING_TEMPLATE = DecisionSchemaDefinition.model_validate({
    "id": "simple",
    "version": "1.0.0",
    "name": "Simple Voting",
    "description": "Basic approval voting where members vote for multiple proposals.",
    "phases": [
        {
            "id": "submission",
            "name": "Proposal Submission",
            "description": "Members submit proposals for consideration.",
            "rules": {
                "proposals": {"submit": True, "edit": True},
                "voting": {"submit": False},
                "advancement": {"method": "date"},
            },
            "settings": _budget_settings(maxProposalsPerMember={
                "type": "number",
                "title": "Maximum Proposals Per Member",
                "description": "How many proposals can each member submit?",
                "minimum": 1,
                "default": 3,
            }),
        },
        {
            "id": "review",
            "name": "Review & Shortlist",
            "description": "Reviewers evaluate and shortlist proposals.",
            "rules": {
                "proposals": {"submit": False},
                "voting": {"submit": False},
                "advancement": {"method": "date"},
            },
            "settings": _budget_settings(),
        },
        {
            "id": "voting",
            "name": "Voting",
            "description": "Members vote on shortlisted proposals.",
            "rules": {
                "proposals": {"submit": False},
                "voting": {"submit": True},
                "advancement": {"method": "date"},
            },
            "settings": _budget_settings(maxVotesPerMember={
                "type": "number",
                "title": "Maximum Votes Per Member",
                "description": "How many proposals can each member vote for?",
                "minimum": 1,
                "default": 3,
            }),
            "selectionPipeline": {
                "version": "1.0.0",
                "blocks": [
                    {
                        "id": "sort-by-likes",
                        "type": "sort",
                        "name": "Sort by likes count",
                        "sortBy": [{"field": "voteData.likesCount", "order": "desc"}],
                    },
                    {
                        "id": "limit-by-votes",
                        "type": "limit",
                        "name": "Take top N (based on maxVotesPerMember config)",
                        "count": {"variable": "maxVotesPerMember"},
                    },
                ],
            },
        },
        {
            "id": "results",
            "name": "Results",
            "description": "View final results and winning proposals.",
            "rules": {
                "proposals": {"submit": False},
                "voting": {"submit": False},
                "advancement": {"method": "manual"},
            },
            "settings": _budget_settings(),
        },
    ],
    "proposalTemplate": {
        "type": "object",
        "properties": {
            "title": {"type": "string", "title": "Proposal title", "x-format": "short-text"},
            "budget": {
                "type": "object",
                "title": "Budget",
                "x-format": "money",
                "properties": {
                    "amount": {"type": "number"},
                    "currency": {"type": "string", "default": "USD"},
                },
            },
            "summary": {"type": "string", "title": "Proposal summary", "x-format": "long-text"},
        },
        "x-field-order": ["title", "budget", "summary"],
        "required": ["summary", "title"],
    },
})

DECISION_TEMPLATES: dict[str, DecisionSchemaDefinition] = {
    SIMPLE_VOTING_TEMPLATE.id: SIMPLE_VOTING_TEMPLATE,
}
