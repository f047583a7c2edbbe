"""
Order Number Sequence
Hands out human readable order numbers of the form ORD-YYMM-NNNN
"""

from datetime import datetime
from stockroom.data.core.virtual_sequence_generator import VirtualSequenceGenerator


class OrderNumberSequence(VirtualSequenceGenerator):
    """
    Global (not per owner, not per month) counter behind order numbers.
    The year/month prefix is taken from the creation date.
    """

    PREFIX = 'ORD'

    @classmethod
    def get_sequence_table_name(cls):
        return "_sequence_order_number"

    @classmethod
    def format_order_number(cls, sequence_value, when=None):
        when = when or datetime.utcnow()
        return f"{cls.PREFIX}-{when.strftime('%y%m')}-{sequence_value:04d}"

    @classmethod
    def get_next_order_number(cls, when=None):
        return cls.format_order_number(cls.get_next_id(), when)
