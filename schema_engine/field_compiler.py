"""
Field Compiler - turns proposal and rubric templates into field descriptors.

Templates are JSON-schema-like objects persisted by the storage layer:

    {
      "type": "object",
      "properties": {"title": {...}, "summary": {"x-format": "long-text"}},
      "x-field-order": ["title", "summary"]
    }

Each output list contains every property key exactly once, in a
deterministic order. Nothing is cached; every call recompiles.
"""

import logging
from collections.abc import Mapping
from typing import Any

from schema_engine.field_order import (
    SYSTEM_FIELD_KEYS,
    get_explicit_order,
    get_properties,
    get_proposal_field_order,
    merge_field_order,
)
from schema_engine.schemas import FieldDescriptor, RubricCriterionInfo, RubricScoringInfo

logger = logging.getLogger(__name__)

FORMAT_KEY = "x-format"
FORMAT_OPTIONS_KEY = "x-format-options"
DEFAULT_FORMAT = "short-text"

REQUIRED_SYSTEM_FIELDS = frozenset({"title"})


def _build_descriptor(key: str, property_schema: Any, is_system: bool = False) -> FieldDescriptor:
    schema = dict(property_schema) if isinstance(property_schema, Mapping) else {}

    field_format = schema.get(FORMAT_KEY)
    if not isinstance(field_format, str) or not field_format:
        field_format = DEFAULT_FORMAT

    options = schema.get(FORMAT_OPTIONS_KEY)
    format_options = dict(options) if isinstance(options, Mapping) else {}

    return FieldDescriptor(
        key=key,
        format=field_format,
        schema=schema,
        is_system=is_system,
        format_options=format_options,
    )


# ==================== PROPOSAL TEMPLATES ====================

def compile_proposal_schema(template: Mapping[str, Any]) -> list[FieldDescriptor]:
    """
    Compile a proposal template into ordered field descriptors.

    A missing required system field (title) is logged, not raised; every
    property that is present still compiles.
    """
    properties = get_properties(template)

    for key in sorted(REQUIRED_SYSTEM_FIELDS):
        if key not in properties:
            logger.warning(f"Proposal template is missing required system field '{key}'")

    field_order = get_proposal_field_order(template)

    descriptors = [
        _build_descriptor(key, properties[key], is_system=key in SYSTEM_FIELD_KEYS)
        for key in field_order.all
        if key in properties
    ]
    logger.debug(f"Compiled proposal template into {len(descriptors)} fields")
    return descriptors


# ==================== RUBRIC TEMPLATES ====================

def compile_rubric_schema(template: Mapping[str, Any]) -> list[FieldDescriptor]:
    """
    Compile a rubric template into ordered field descriptors.

    Keys listed in x-field-order come first, in that order, followed by the
    remaining properties in declaration order. No system-field concept.
    """
    properties = get_properties(template)
    if not properties:
        return []

    keys = merge_field_order(get_explicit_order(template), properties)
    return [_build_descriptor(key, properties[key]) for key in keys]


def get_rubric_scoring_info(template: Mapping[str, Any]) -> RubricScoringInfo:
    """
    Summarize a rubric for scoring.

    Only integer criteria with a numeric maximum are scored; everything else
    is qualitative and contributes 0 points.
    """
    criteria = []
    summary: dict[str, int] = {}

    for descriptor in compile_rubric_schema(template):
        schema = descriptor.schema
        maximum = schema.get("maximum")
        scored = (
            schema.get("type") == "integer"
            and isinstance(maximum, (int, float))
            and not isinstance(maximum, bool)
        )

        title = schema.get("title")
        criteria.append(RubricCriterionInfo(
            key=descriptor.key,
            title=title if isinstance(title, str) and title else descriptor.key,
            format=descriptor.format,
            scored=scored,
            max_points=maximum if scored else 0,
        ))
        summary[descriptor.format] = summary.get(descriptor.format, 0) + 1

    return RubricScoringInfo(
        criteria=criteria,
        total_points=sum(c.max_points for c in criteria),
        summary=summary,
    )
