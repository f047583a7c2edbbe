"""
Product Service
Read-side catalog queries for list and detail views.
"""

from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import joinedload

from stockroom.business.core.errors import ProductNotFound
from stockroom.data.catalog.product import Product
from stockroom.data.inventory.stock_movement import StockMovement


class ProductService:

    @staticmethod
    def list_products(
        user_id: int,
        search: Optional[str] = None,
        category: Optional[str] = None,
        low_stock: bool = False
    ) -> List[Product]:
        """
        Args:
            search: case-insensitive match on name, SKU or description
            category: exact category
            low_stock: only products at or below their reorder point
        """
        query = Product.owned_by(user_id).options(joinedload(Product.supplier))
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(
                Product.name.ilike(pattern),
                Product.sku.ilike(pattern),
                Product.description.ilike(pattern),
            ))
        if category:
            query = query.filter(Product.category == category)
        if low_stock:
            query = query.filter(Product.stock <= Product.reorder_point)
        return query.order_by(Product.created_at.desc(), Product.id.desc()).all()

    @staticmethod
    def get_product(user_id: int, product_id: int) -> Product:
        product = Product.get_owned(product_id, user_id)
        if product is None:
            raise ProductNotFound(product_id)
        return product

    @staticmethod
    def get_movements(user_id: int, product_id: int, limit: Optional[int] = None) -> List[StockMovement]:
        """Movement history of one product, most recent first"""
        ProductService.get_product(user_id, product_id)
        query = StockMovement.owned_by(user_id).filter(StockMovement.product_id == product_id)
        query = query.order_by(StockMovement.movement_date.desc(), StockMovement.id.desc())
        if limit:
            query = query.limit(limit)
        return query.all()

    @staticmethod
    def list_categories(user_id: int) -> List[str]:
        rows = Product.owned_by(user_id).with_entities(Product.category).distinct().all()
        return sorted(row[0] for row in rows if row[0])
