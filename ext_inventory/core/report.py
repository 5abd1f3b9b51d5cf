"""
Report Module
Serializes extension records to CSV
"""

import csv
import io
import logging
from typing import Iterable

from ..config import REPORT_COLUMNS
from .scanner import ExtensionRecord

logger = logging.getLogger(__name__)


def records_to_csv(records: Iterable[ExtensionRecord]) -> str:
    """
    Serialize records as CSV text (header always included)

    Args:
        records: Records to write

    Returns:
        str: CSV document
    """
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=REPORT_COLUMNS)
    writer.writeheader()
    for record in records:
        writer.writerow(record.to_row())
    return buffer.getvalue()

