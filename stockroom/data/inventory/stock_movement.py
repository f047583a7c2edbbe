from stockroom import db
from stockroom.data.core.owned_base import OwnedBase
from datetime import datetime


class StockMovement(OwnedBase):
    """
    Audit trail for every stock change.

    Conventions:
    - `quantity_delta` is positive for increases and negative for decreases.
    - `order_id` is set for movements caused by an order lifecycle event.
    """
    __tablename__ = 'stock_movements'

    ORDER_CREATED = 'order_created'
    ORDER_CANCELLED = 'order_cancelled'
    ORDER_REACTIVATED = 'order_reactivated'
    ADJUSTMENT = 'adjustment'

    product_id = db.Column(db.Integer, db.ForeignKey('products.id'), nullable=True, index=True)
    order_id = db.Column(db.Integer, db.ForeignKey('orders.id'), nullable=True, index=True)
    movement_type = db.Column(db.String(30), nullable=False)
    quantity_delta = db.Column(db.Integer, nullable=False)
    movement_date = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    notes = db.Column(db.Text, nullable=True)

    def __repr__(self):
        return f'<StockMovement product={self.product_id} {self.movement_type} {self.quantity_delta:+d}>'
