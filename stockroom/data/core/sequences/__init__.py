"""
Sequence ID Managers
"""

from stockroom.data.core.sequences.order_number_sequence import OrderNumberSequence

__all__ = [
    'OrderNumberSequence',
]
