from .reconciler import GroupReconciler, ReconciliationResult
from .table_renderer import TableRenderer, column_widths, pad_rows

__all__ = ['GroupReconciler', 'ReconciliationResult', 'TableRenderer', 'column_widths', 'pad_rows']
