"""
Business layer for the stockroom system.
Holds domain rules (stock mutation, order lifecycle, reorder math, report
analysis) separated from persistence and HTTP concerns.
"""
