from stockroom import db
from stockroom.data.core.owned_base import OwnedBase


class Supplier(OwnedBase):
    """A vendor products are reordered from. Lead time feeds the reorder engine."""
    __tablename__ = 'suppliers'

    name = db.Column(db.String(200), nullable=False)
    contact = db.Column(db.String(200), nullable=True)
    email = db.Column(db.String(200), nullable=True)
    lead_time_days = db.Column(db.Integer, nullable=True)
    reliability = db.Column(db.Float, nullable=True)  # 0-100

    __table_args__ = (
        db.CheckConstraint('lead_time_days IS NULL OR lead_time_days >= 0', name='ck_supplier_lead_time'),
    )

    products = db.relationship('Product', back_populates='supplier')

    def __repr__(self):
        return f'<Supplier {self.name}>'
