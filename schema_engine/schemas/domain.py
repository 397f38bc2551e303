"""
Decision Schema Engine - Pydantic v2 Schemas

Core models for decision process definitions and the runtime configs derived
from them.

Two schema generations live side by side:
- Phase-based definitions (DecisionSchemaDefinition / PhaseDefinition) and the
  JSON form definitions used to configure voting (VotingSchemaDefinition).
- The older flat "handler" shape (DecisionProcessSchemaBase) that is still
  present in stored process rows.

Stored data keys stay camelCase (schemaType, allowProposals, ...) through
field aliases; Python code uses the snake_case attribute names.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    field_validator,
    model_validator,
)


DIRECT_TRANSFORM = "direct"


class SchemaType(str, Enum):
    """Built-in schema types. Runtime-registered types are plain strings."""
    DEFAULT = "default"
    SIMPLE = "simple"
    ADVANCED = "advanced"


class PhasePosition(str, Enum):
    """Where a phase sits in its definition, inferred from list position."""
    INITIAL = "initial"
    INTERMEDIATE = "intermediate"
    FINAL = "final"


class AdvancementMethod(str, Enum):
    DATE = "date"
    MANUAL = "manual"


# ---------------------------------------------------------------------------
# Voting schema definitions (JSON form based)
# ---------------------------------------------------------------------------


class FieldBinding(BaseModel):
    """Maps one form field to a dot-path inside the derived process schema."""
    target: str = Field(..., min_length=1, description="Dot-path destination, e.g. 'instanceData.fieldValues.x'")
    transform: Optional[str] = Field(
        None,
        description="'direct' (or absent) bindings are applied automatically; anything else is left to the caller"
    )

    @property
    def is_direct(self) -> bool:
        return not self.transform or self.transform == DIRECT_TRANSFORM


class VotingSchemaDefinition(BaseModel):
    """
    Named template of a voting configuration.

    `schema_type` is the registry key. `form_schema` / `ui_schema` are handed
    to the rendering layer untouched; `defaults` and `bindings` drive the
    Binding Processor.
    """
    model_config = ConfigDict(populate_by_name=True)

    schema_type: str = Field(..., alias="schemaType", min_length=1)
    name: str = Field(..., min_length=1)
    description: str = ""
    form_schema: dict[str, Any] = Field(default_factory=dict, alias="formSchema")
    ui_schema: dict[str, Any] = Field(default_factory=dict, alias="uiSchema")
    defaults: dict[str, Any] = Field(default_factory=dict)
    bindings: dict[str, FieldBinding] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Phase-based decision definitions
# ---------------------------------------------------------------------------


class ActionRules(BaseModel):
    submit: Optional[bool] = None
    edit: Optional[bool] = None


class AdvancementRule(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    method: AdvancementMethod = AdvancementMethod.MANUAL
    end_date: Optional[str] = Field(None, alias="endDate")


class PhaseRules(BaseModel):
    """Permission rules for a single phase."""
    proposals: Optional[ActionRules] = None
    voting: Optional[ActionRules] = None
    advancement: Optional[AdvancementRule] = None


class PhaseDefinition(BaseModel):
    """
    One stage of a decision process.

    Ordering inside the owning list is significant: first = initial phase,
    last = final phase. There is no stored position flag.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., min_length=1)
    name: str
    description: Optional[str] = None
    rules: PhaseRules = Field(default_factory=PhaseRules)
    selection_pipeline: Optional[dict[str, Any]] = Field(
        None,
        alias="selectionPipeline",
        description="Filter/reduce blocks applied when the process advances; carried, never executed here"
    )
    settings: Optional[dict[str, Any]] = Field(
        None,
        description="JSON schema of user-configurable phase settings"
    )


class DecisionSchemaDefinition(BaseModel):
    """Phase-based definition of what a decision process is."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., min_length=1)
    version: str = "1.0.0"
    name: str
    description: str = ""
    phases: list[PhaseDefinition] = Field(..., min_length=1)
    proposal_template: Optional[dict[str, Any]] = Field(None, alias="proposalTemplate")
    rubric_template: Optional[dict[str, Any]] = Field(None, alias="rubricTemplate")

    @field_validator("phases")
    @classmethod
    def check_unique_phase_ids(cls, v):
        """Phase ids are lookup keys and must not repeat."""
        seen = set()
        for phase in v:
            if phase.id in seen:
                raise ValueError(f"Duplicate phase id: {phase.id}")
            seen.add(phase.id)
        return v


# ---------------------------------------------------------------------------
# Compiled field descriptors
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FieldDescriptor:
    """Render-ready description of one template property."""
    key: str
    format: str
    schema: dict[str, Any]
    is_system: bool = False
    format_options: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class FieldOrder:
    """Resolved key order for a proposal template."""
    system: list[str]
    dynamic: list[str]
    all: list[str]


@dataclass(frozen=True)
class RubricCriterionInfo:
    key: str
    title: str
    format: str
    scored: bool
    max_points: Union[int, float]


@dataclass(frozen=True)
class RubricScoringInfo:
    criteria: list[RubricCriterionInfo]
    total_points: Union[int, float]
    summary: dict[str, int]


# ---------------------------------------------------------------------------
# Derived runtime configs (definition-based path)
# ---------------------------------------------------------------------------


class ProcessedVotingConfig(BaseModel):
    """
    Read-only voting snapshot derived from form data + definition defaults.

    Form values are carried as submitted; only missing or None values are
    replaced by defaults. Type checking belongs to the upstream form layer.
    """
    model_config = ConfigDict(frozen=True)

    allow_proposals: Any
    allow_decisions: Any
    max_votes_per_member: Any
    schema_type: str
    additional_config: dict[str, Any] = Field(default_factory=dict)


class ProcessedProposalConfig(BaseModel):
    """Read-only proposal snapshot; constraints are schema-type independent."""
    model_config = ConfigDict(frozen=True)

    required_fields: list[str]
    optional_fields: list[str]
    field_constraints: dict[str, dict[str, Any]]
    schema_type: str
    allow_proposals: Any


class SchemaProcessResult(BaseModel):
    schema_type: str
    is_valid: bool = True
    errors: list[str] = Field(default_factory=list)
    voting_config: ProcessedVotingConfig
    proposal_config: ProcessedProposalConfig


# ---------------------------------------------------------------------------
# Legacy flat schema shape
# ---------------------------------------------------------------------------


class LegacyInstanceData(BaseModel):
    """
    Nested instance data of a legacy process schema.

    Both vote-cap spellings exist in stored rows; they are kept verbatim.
    At least one must be present.
    """
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    max_votes_per_elector: Optional[StrictInt] = Field(None, alias="maxVotesPerElector", ge=0)
    max_votes_per_member: Optional[StrictInt] = Field(None, alias="maxVotesPerMember", ge=0)

    @model_validator(mode="after")
    def check_vote_cap_present(self):
        if self.max_votes_per_elector is None and self.max_votes_per_member is None:
            raise ValueError("instanceData requires maxVotesPerElector or maxVotesPerMember")
        return self


class DecisionProcessSchemaBase(BaseModel):
    """Base structural shape every legacy process schema must satisfy. Unknown keys are kept."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    allow_proposals: StrictBool = Field(..., alias="allowProposals")
    allow_decisions: StrictBool = Field(..., alias="allowDecisions")
    instance_data: LegacyInstanceData = Field(..., alias="instanceData")
    schema_type: Optional[str] = Field(None, alias="schemaType")


class SchemaValidationResult(BaseModel):
    is_valid: bool
    schema_type: str
    errors: list[str] = Field(default_factory=list)
    supported_properties: list[str] = Field(default_factory=list)


class VotingConfig(BaseModel):
    """Legacy voting config extracted straight from a stored process schema."""
    allow_proposals: Any
    allow_decisions: Any
    max_votes_per_elector: Optional[int] = None
    max_votes_per_member: Any = None
    schema_type: str = "unknown"
    additional_config: Optional[dict[str, Any]] = None


class ProposalConfig(BaseModel):
    """Legacy proposal config; overlays may extend the base field lists."""
    required_fields: list[str]
    optional_fields: list[str]
    field_constraints: dict[str, Any]
    schema_type: str = "unknown"
    allow_proposals: Any


class LegacyProcessResult(BaseModel):
    """Result shape of the old handler-based processSchema call."""
    schema_type: str
    is_valid: bool
    voting_config: Optional[VotingConfig] = None
    proposal_config: Optional[ProposalConfig] = None
    validation_result: SchemaValidationResult


class VoteSelectionResult(BaseModel):
    is_valid: bool
    errors: list[str] = Field(default_factory=list)


class SchemaCompatibility(BaseModel):
    is_compatible: bool
    missing_properties: list[str] = Field(default_factory=list)
