from .base_file_adapter import BaseFileAdapter, parse_count
from .report_adapter import RecordScanner, extract_report_date
from .target_adapter import TargetLoader

__all__ = ['BaseFileAdapter', 'RecordScanner', 'TargetLoader', 'extract_report_date', 'parse_count']
