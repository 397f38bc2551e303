"""
Field ordering for proposal and rubric templates.

Templates carry an optional explicit order extension (`x-field-order`, or the
older `ui.ui:order` written by the proposal builder). Keys named there come
first, then every other declared property in declaration order. Keys in the
order list without a matching property are dropped.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from schema_engine.schemas import FieldOrder

FIELD_ORDER_KEY = "x-field-order"
UI_ORDER_KEY = "ui:order"

# System fields have dedicated renderers; listed in layout order
SYSTEM_FIELD_KEYS = ("title", "category", "budget")


def get_properties(template: Mapping[str, Any]) -> dict[str, Any]:
    if not isinstance(template, Mapping):
        return {}
    properties = template.get("properties")
    if not isinstance(properties, Mapping):
        return {}
    return dict(properties)


def get_explicit_order(template: Mapping[str, Any]) -> list[str]:
    """Return the template's explicit order list, or [] if it has none."""
    if not isinstance(template, Mapping):
        return []
    order = template.get(FIELD_ORDER_KEY)
    if order is None:
        ui = template.get("ui")
        if isinstance(ui, Mapping):
            order = ui.get(UI_ORDER_KEY)

    if not isinstance(order, (list, tuple)):
        return []
    return [key for key in order if isinstance(key, str)]


def merge_field_order(order: Iterable[str], properties: Mapping[str, Any]) -> list[str]:
    """First occurrence of each key in [*order, *properties] that exists in properties."""
    result = []
    seen = set()
    for key in [*order, *properties]:
        if key in seen or key not in properties:
            continue
        seen.add(key)
        result.append(key)
    return result


def get_proposal_field_order(template: Mapping[str, Any]) -> FieldOrder:
    """
    Resolve the canonical key order of a proposal template.

    System fields come first in SYSTEM_FIELD_KEYS order (the renderer lays
    them out above everything else), followed by dynamic fields in merged
    explicit/declaration order.
    """
    properties = get_properties(template)
    merged = merge_field_order(get_explicit_order(template), properties)

    system = [key for key in SYSTEM_FIELD_KEYS if key in properties]
    dynamic = [key for key in merged if key not in SYSTEM_FIELD_KEYS]

    return FieldOrder(system=system, dynamic=dynamic, all=system + dynamic)
