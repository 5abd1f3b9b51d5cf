"""Core functionality package"""

from .scanner import ExtensionRecord, ExtensionScanner, resolve_locale_name, scan
from .aggregator import aggregate
from .report import records_to_csv
from .sinks import BlobUploadSink, LocalFileSink, ReportSink, create_sink
from .user_session import (
    ActiveUserResolver,
    StaticUserResolver,
    WindowsActiveUserResolver,
    resolve_browser_roots,
)

__all__ = [
    'ExtensionRecord',
    'ExtensionScanner',
    'resolve_locale_name',
    'scan',
    'aggregate',
    'records_to_csv',
    'ReportSink',
    'LocalFileSink',
    'BlobUploadSink',
    'create_sink',
    'ActiveUserResolver',
    'StaticUserResolver',
    'WindowsActiveUserResolver',
    'resolve_browser_roots',
]
