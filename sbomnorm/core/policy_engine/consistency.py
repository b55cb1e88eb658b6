from __future__ import annotations

import logging
from typing import AbstractSet, Iterable, List, Sequence, Union

from sbomnorm.core.catalog.relationship import Relationship

log = logging.getLogger("sbomnorm.consistency")


def remove_dangling_relationships(
    relationships: Sequence[Relationship],
    dropped_ids: Union[AbstractSet[str], Iterable[str]],
) -> List[Relationship]:
    """Return the relationships whose endpoints both survived.

    Endpoints are matched by id only. A stubbed package keeps its id, so its
    relationships are retained; only ids in dropped_ids invalidate an edge.

    Time:  O(|relationships| + |dropped_ids|)
    Space: O(|dropped_ids|)
    """

    dropped = dropped_ids if isinstance(dropped_ids, (set, frozenset)) else frozenset(dropped_ids)
    if not dropped:
        return list(relationships)

    kept: List[Relationship] = []
    for rel in relationships:
        if rel.from_id in dropped or rel.to_id in dropped:
            continue
        kept.append(rel)

    removed = len(relationships) - len(kept)
    if removed:
        log.debug("removed %d relationship(s) referencing dropped packages", removed)
    return kept
