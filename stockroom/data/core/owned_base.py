from stockroom import db
from datetime import datetime
from sqlalchemy.orm import declared_attr
from stockroom.business.core.data_insertion_mixin import DataInsertionMixin


class OwnedBase(db.Model, DataInsertionMixin):
    """Abstract base class for every record that belongs to a single user's scope"""

    __abstract__ = True

    @declared_attr
    def __tablename__(cls):
        return cls.__name__.lower() + 's'

    id = db.Column(db.Integer, primary_key=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @declared_attr
    def user_id(cls):
        return db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)

    @classmethod
    def owned_by(cls, user_id):
        """Query restricted to one owner scope"""
        return cls.query.filter(cls.user_id == user_id)

    @classmethod
    def get_owned(cls, record_id, user_id):
        """Fetch a record only if it belongs to the given owner, else None"""
        return cls.owned_by(user_id).filter(cls.id == record_id).first()
