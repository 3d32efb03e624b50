"""
Category-timestamp association.

Maps a result category back to the time-coded observations that produced
it. Labels are compared after lower-casing and replacing '/' and '_' with a
space, so "Sexual_Content" matches "sexual content".
"""
from dataclasses import replace
from typing import Dict, Iterable, List, Sequence

from modreview.moderation.categories import labels_match
from modreview.moderation.result import ModerationResult, TimeMarker


def associate(category: str, observations: Iterable[TimeMarker]) -> List[TimeMarker]:
    """
    Return the observations whose labels match ``category``.

    The output is sorted by time offset ascending (stable for equal
    offsets). No match yields an empty list.
    """
    matched = [
        obs for obs in observations
        if any(labels_match(category, label) for label in obs.categories)
    ]
    return sorted(matched, key=lambda obs: obs.time_offset_seconds)


def associate_all(
    result: ModerationResult,
    observations: Sequence[TimeMarker]
) -> Dict[str, List[TimeMarker]]:
    """Map every category of ``result`` to its matching observations."""
    return {category: associate(category, observations) for category in result.categories}


def attach_timestamps(
    result: ModerationResult,
    observations: Sequence[TimeMarker]
) -> ModerationResult:
    """
    Return a copy of ``result`` whose timestamps are the observations that
    match at least one of its categories, in time order.
    """
    matched = [
        obs for obs in observations
        if any(labels_match(category, label)
               for category in result.categories
               for label in obs.categories)
    ]
    matched.sort(key=lambda obs: obs.time_offset_seconds)
    return replace(result, timestamps=matched)
