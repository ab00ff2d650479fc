"""
Framework-free document workflow: totals, line reconciliation, persistence
of invoice/quote aggregates, conversion, the overdue sweep and read models.
"""
