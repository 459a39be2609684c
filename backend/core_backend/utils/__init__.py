"""
Shared helpers for the POS apps: keyed accumulators for report aggregation
and cleanup plans for multi-table deletions.
"""
