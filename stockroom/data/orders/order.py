from stockroom import db
from stockroom.data.core.owned_base import OwnedBase


class Order(OwnedBase):
    """
    Customer order. Line prices are snapshots taken at creation time and are
    never re-derived from the catalog.
    """
    __tablename__ = 'orders'

    PAYMENT_METHODS = ('cash', 'card', 'bank-transfer')
    PAYMENT_STATUSES = ('pending', 'completed', 'failed', 'refunded')

    order_number = db.Column(db.String(20), unique=True, nullable=False)

    # Customer
    customer_name = db.Column(db.String(200), nullable=False)
    customer_email = db.Column(db.String(200), nullable=False)
    customer_phone = db.Column(db.String(50), nullable=True)
    customer_address = db.Column(db.Text, nullable=True)

    total_amount = db.Column(db.Float, nullable=False, default=0.0)
    status = db.Column(db.String(20), nullable=False, default='pending', index=True)

    # Payment
    payment_method = db.Column(db.String(20), nullable=False)
    payment_status = db.Column(db.String(20), nullable=False, default='pending')
    transaction_id = db.Column(db.String(100), nullable=True)

    notes = db.Column(db.Text, nullable=True)
    processed_by_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)

    __table_args__ = (
        db.CheckConstraint('total_amount >= 0', name='ck_order_total_non_negative'),
    )

    items = db.relationship(
        'OrderItem',
        back_populates='order',
        cascade='all, delete-orphan',
        order_by='OrderItem.id',
    )

    def __repr__(self):
        return f'<Order {self.order_number} status={self.status}>'

    def to_dict(self, include_relationships=True, include_audit_fields=True):
        result = super().to_dict(include_relationships=False, include_audit_fields=include_audit_fields)
        if include_relationships:
            result['items'] = [item.to_dict() for item in self.items]
        return result
