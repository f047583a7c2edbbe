from stockroom import db
from stockroom.business.core.data_insertion_mixin import DataInsertionMixin


class OrderItem(db.Model, DataInsertionMixin):
    """
    One order line. `price`, `product_name` and `sku` are copied from the
    product when the order is created; `product_id` becomes NULL if the
    product is later deleted.
    """
    __tablename__ = 'order_items'

    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.Integer, db.ForeignKey('orders.id'), nullable=False, index=True)
    product_id = db.Column(db.Integer, db.ForeignKey('products.id'), nullable=True, index=True)

    product_name = db.Column(db.String(200), nullable=False)
    sku = db.Column(db.String(100), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    price = db.Column(db.Float, nullable=False)

    __table_args__ = (
        db.CheckConstraint('quantity >= 1', name='ck_order_item_quantity_positive'),
        db.CheckConstraint('price >= 0', name='ck_order_item_price_non_negative'),
    )

    order = db.relationship('Order', back_populates='items')
    product = db.relationship('Product')

    @property
    def line_total(self):
        return round(self.quantity * self.price, 2)

    def to_dict(self, include_relationships=False, include_audit_fields=True):
        result = super().to_dict(include_relationships=False, include_audit_fields=include_audit_fields)
        result['line_total'] = self.line_total
        return result

    def __repr__(self):
        return f'<OrderItem {self.sku} x{self.quantity} @ {self.price}>'
