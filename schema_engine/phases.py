"""
Phase helpers for phase-based decision definitions.

Position is inferred from list order (first = initial, last = final);
nothing on the phase itself marks it. Permission helpers read the phase's
rules and treat a missing flag as False.
"""

from typing import Optional, Sequence

from schema_engine.schemas import DecisionSchemaDefinition, PhaseDefinition, PhasePosition


def get_phase(definition: DecisionSchemaDefinition, phase_id: str) -> Optional[PhaseDefinition]:
    for phase in definition.phases:
        if phase.id == phase_id:
            return phase
    return None


def get_phase_position(phases: Sequence[PhaseDefinition], phase_id: str) -> Optional[PhasePosition]:
    """
    Position of phase_id within phases, or None if it is not there.

    A single-phase list reports INITIAL.
    """
    ids = [phase.id for phase in phases]
    if phase_id not in ids:
        return None

    index = ids.index(phase_id)
    if index == 0:
        return PhasePosition.INITIAL
    if index == len(ids) - 1:
        return PhasePosition.FINAL
    return PhasePosition.INTERMEDIATE


def can_submit_proposals(phase: PhaseDefinition) -> bool:
    proposals = phase.rules.proposals
    return bool(proposals and proposals.submit)


def can_edit_proposals(phase: PhaseDefinition) -> bool:
    proposals = phase.rules.proposals
    return bool(proposals and proposals.edit)


def can_vote(phase: PhaseDefinition) -> bool:
    voting = phase.rules.voting
    return bool(voting and voting.submit)
