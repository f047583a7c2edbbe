"""
Virtual Sequence Generator Base Class
Counter tables that hand out monotonically increasing numbers on any backend
"""

from stockroom import db
from sqlalchemy import text
import threading
from abc import ABC, abstractmethod


class VirtualSequenceGenerator(ABC):
    """
    Abstract base class for sequence generators.

    Each subclass owns a one-row counter table. `get_next_id` bumps the
    counter inside the caller's session transaction, so a rolled back
    transaction also gives its number back.
    """

    _lock = threading.Lock()

    @classmethod
    @abstractmethod
    def get_sequence_table_name(cls):
        """Return the table name for the sequence counter"""

    @classmethod
    def get_next_id(cls):
        table = cls.get_sequence_table_name()
        with cls._lock:
            updated = db.session.execute(text(f"UPDATE {table} SET current_value = current_value + 1"))
            if updated.rowcount == 0:
                # Counter row missing (fresh database without build step)
                db.session.execute(text(f"INSERT INTO {table} (current_value) VALUES (1)"))
            result = db.session.execute(text(f"SELECT current_value FROM {table}"))
            return result.scalar()

    @classmethod
    def create_sequence_if_not_exists(cls):
        """Create the counter table and its single row"""
        table = cls.get_sequence_table_name()
        try:
            db.session.execute(text(f"""
                CREATE TABLE IF NOT EXISTS {table} (
                    id INTEGER PRIMARY KEY,
                    current_value INTEGER DEFAULT 0
                )
            """))

            result = db.session.execute(text(f"SELECT COUNT(*) FROM {table}"))
            if result.scalar() == 0:
                db.session.execute(text(f"INSERT INTO {table} (current_value) VALUES (0)"))

            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

