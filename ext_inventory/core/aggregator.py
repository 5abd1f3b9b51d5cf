"""
Aggregator Module
Merges per-browser scan results into one record per extension id
"""

import logging
from typing import Iterable, List

from .scanner import ExtensionRecord

logger = logging.getLogger(__name__)


def aggregate(per_browser_results: Iterable[Iterable[ExtensionRecord]]) -> List[ExtensionRecord]:
    """
    Concatenate scan results and keep one record per extension id

    The sort is stable, so for a duplicated id the record that came first in
    the concatenated input survives.

    Args:
        per_browser_results: One sequence of records per scanned browser root

    Returns:
        List of ExtensionRecord sorted ascending by extension_id
    """
    combined = [record for results in per_browser_results for record in results]

    unique: List[ExtensionRecord] = []
    seen = set()
    for record in sorted(combined, key=lambda r: r.extension_id):
        if record.extension_id in seen:
            continue
        seen.add(record.extension_id)
        unique.append(record)

    if len(unique) < len(combined):
        logger.debug(f"Collapsed {len(combined) - len(unique)} duplicate record(s)")
    return unique
