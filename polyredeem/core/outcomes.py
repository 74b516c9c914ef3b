from __future__ import annotations

from polyredeem.core.errors import InvalidOutcomeIndex
from polyredeem.core.types import OUTCOME_INDICES, BinaryOutcomeConfig, ResolvedOutcome


def check_index(index: object) -> int:
    # bool is an int subclass; True/False are not indices.
    if isinstance(index, bool) or not isinstance(index, int) or index not in OUTCOME_INDICES:
        raise InvalidOutcomeIndex(index)
    return index


def resolve_outcome(config: BinaryOutcomeConfig | None, explicit_index: int | None = None) -> ResolvedOutcome | None:
    """Attach a display name to an explicit outcome index.

    Returns None when no index is given: the winning index then has to come
    from the chain, never from a name lookup.
    """
    if explicit_index is None:
        return None
    index = check_index(explicit_index)
    return ResolvedOutcome(index=index, name=config.name_for(index) if config else None)


def outcome_name(index: int | None, config: BinaryOutcomeConfig | None) -> str | None:
    if index is None or config is None:
        return None
    return config.name_for(index)


def outcome_label(index: int, config: BinaryOutcomeConfig | None) -> str:
    return outcome_name(index, config) or f"outcome {index}"
