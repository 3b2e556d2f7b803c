"""
Variable resolution against an extension's variable catalog.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from extension_transformation.schemas import Variable

logger = logging.getLogger(__name__)


def resolve_variables(catalog: Sequence[Variable], variable_ids: Iterable[str]) -> list[Variable]:
    """
    Look up variables by id, in request order.

    For each requested id every catalog entry with that id is returned, in
    catalog order, so duplicate entries are all kept. Ids without a match
    are skipped; a missing input shows up later as a fetch failure.

    Args:
        catalog: Variables declared on the extension
        variable_ids: Requested variable ids

    Returns:
        Matching variables grouped by requested id
    """
    variables: list[Variable] = []
    for variable_id in variable_ids:
        matches = [v for v in catalog if v.variable_id == variable_id]
        if not matches:
            logger.debug(f"[resolver] No variable declared for id={variable_id}")
        variables.extend(matches)
    return variables
