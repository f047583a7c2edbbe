from stockroom import db
from stockroom.data.core.owned_base import OwnedBase


class Product(OwnedBase):
    """
    Catalog entry. `stock` is only changed through the stock manager
    (order creation, cancellation, reactivation, direct adjustment).
    """
    __tablename__ = 'products'

    STATUSES = ('active', 'discontinued', 'out-of-stock')

    name = db.Column(db.String(200), nullable=False)
    sku = db.Column(db.String(100), nullable=False)
    description = db.Column(db.Text, nullable=True)
    category = db.Column(db.String(100), nullable=False, default='Uncategorized')
    unit = db.Column(db.String(50), nullable=False, default='piece')
    price = db.Column(db.Float, nullable=False, default=0.0)
    stock = db.Column(db.Integer, nullable=False, default=0)
    reorder_point = db.Column(db.Integer, nullable=False, default=10)
    status = db.Column(db.String(20), nullable=False, default='active')

    supplier_id = db.Column(db.Integer, db.ForeignKey('suppliers.id'), nullable=True)

    __table_args__ = (
        db.UniqueConstraint('user_id', 'sku', name='uix_product_owner_sku'),
        db.CheckConstraint('stock >= 0', name='ck_product_stock_non_negative'),
        db.CheckConstraint('price >= 0', name='ck_product_price_non_negative'),
        db.CheckConstraint('reorder_point >= 0', name='ck_product_reorder_point_non_negative'),
    )

    supplier = db.relationship('Supplier', back_populates='products')

    def __repr__(self):
        return f'<Product {self.sku}: {self.name} stock={self.stock}>'

    @property
    def lead_time_days(self):
        """Supplier-quoted lead time; None lets the reorder engine apply its default"""
        if self.supplier is not None and self.supplier.lead_time_days:
            return self.supplier.lead_time_days
        return None

    def to_dict(self, include_relationships=True, include_audit_fields=True):
        result = super().to_dict(include_relationships=False, include_audit_fields=include_audit_fields)
        if include_relationships:
            result['supplier'] = self.supplier.to_dict(include_audit_fields=False) if self.supplier else None
        return result
