"""
Combining locally stored records with freshly extracted ones.
"""

from __future__ import annotations

from typing import List, Sequence, Set

from ..extractor.models import ExtractedRecord


def merge_records(
    local: Sequence[ExtractedRecord],
    remote: Sequence[ExtractedRecord],
    max_results: int,
) -> List[ExtractedRecord]:
    """
    Merge ``remote`` records behind ``local`` ones, skipping known ids.

    Local records always win and keep their order. A remote record is
    skipped when its ``external_id`` matches a record already in the result;
    remote records without an id cannot be matched and are kept.

    Args:
        local: Records the caller already holds (e.g. from its own store)
        remote: Records extracted from a catalog response
        max_results: Upper bound on the merged list length

    Returns:
        At most ``max_results`` records
    """
    if max_results < 1:
        raise ValueError("max_results must be >= 1")
    if len(local) >= max_results:
        return list(local[:max_results])

    merged = list(local)
    seen: Set[str] = {record.external_id for record in merged if record.external_id is not None}
    for record in remote:
        if len(merged) >= max_results:
            break
        if record.external_id is not None:
            if record.external_id in seen:
                continue
            seen.add(record.external_id)
        merged.append(record)
    return merged
