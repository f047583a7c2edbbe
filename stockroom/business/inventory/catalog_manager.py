from __future__ import annotations

from sqlalchemy.exc import IntegrityError

from stockroom import db
from stockroom.business.core.errors import DuplicateSku, ProductNotFound, SupplierNotFound
from stockroom.business.inventory.stock_manager import StockManager
from stockroom.data.catalog.product import Product
from stockroom.data.catalog.supplier import Supplier
from stockroom.data.inventory.stock_movement import StockMovement
from stockroom.data.orders.order_item import OrderItem
from stockroom.logger import get_logger

logger = get_logger("stockroom.business.inventory.catalog_manager")


def _is_duplicate_sku(error: IntegrityError) -> bool:
    """True when the owner/SKU unique constraint rejected the row (lost a race with another writer)"""
    message = str(error.orig).lower()
    return 'uix_product_owner_sku' in message or ('unique' in message and 'sku' in message)


class CatalogManager:
    """
    Product and supplier writes for one owner scope.

    Payloads are expected to be validated already (see business.core.validators).
    Each method commits on success and rolls back on failure.
    """

    def __init__(self, user_id: int):
        self.user_id = user_id
        self.stock = StockManager(user_id)

    # Suppliers -----------------------------------------------------------

    def get_supplier(self, supplier_id: int) -> Supplier:
        supplier = Supplier.get_owned(supplier_id, self.user_id)
        if supplier is None:
            raise SupplierNotFound(supplier_id)
        return supplier

    def create_supplier(self, data: dict) -> Supplier:
        return Supplier.create_from_dict(data, user_id=self.user_id)

    def update_supplier(self, supplier_id: int, data: dict) -> Supplier:
        try:
            supplier = self.get_supplier(supplier_id)
            supplier.update_from_dict(data)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        return supplier

    def delete_supplier(self, supplier_id: int) -> None:
        """Products keep existing without a supplier (lead time falls back to the default)"""
        try:
            supplier = self.get_supplier(supplier_id)
            Product.owned_by(self.user_id).filter(Product.supplier_id == supplier.id).update(
                {Product.supplier_id: None}, synchronize_session=False
            )
            db.session.delete(supplier)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        logger.info(f"Deleted supplier {supplier_id}")

    # Products ------------------------------------------------------------

    def get_product(self, product_id: int) -> Product:
        product = Product.get_owned(product_id, self.user_id)
        if product is None:
            raise ProductNotFound(product_id)
        return product

    def _check_sku_free(self, sku: str, exclude_id: int | None = None) -> None:
        query = Product.owned_by(self.user_id).filter(Product.sku == sku)
        if exclude_id is not None:
            query = query.filter(Product.id != exclude_id)
        if query.first() is not None:
            raise DuplicateSku(sku)

    def _check_supplier(self, data: dict) -> None:
        supplier_id = data.get('supplier_id')
        if supplier_id is not None:
            self.get_supplier(supplier_id)

    def create_product(self, data: dict) -> Product:
        try:
            self._check_sku_free(data['sku'])
            self._check_supplier(data)
            product = Product.from_dict(data, user_id=self.user_id)
            db.session.add(product)
            db.session.flush()
            if product.stock:
                db.session.add(StockMovement(
                    user_id=self.user_id,
                    product_id=product.id,
                    movement_type=StockMovement.ADJUSTMENT,
                    quantity_delta=product.stock,
                    notes='Initial stock',
                ))
            db.session.commit()
        except IntegrityError as e:
            db.session.rollback()
            if 'sku' in data and _is_duplicate_sku(e):
                raise DuplicateSku(data['sku']) from e
            raise
        except Exception:
            db.session.rollback()
            raise
        logger.info(f"Created product {product.sku} for user {self.user_id}")
        return product

    def update_product(self, product_id: int, data: dict) -> Product:
        """
        A `stock` value in the payload becomes a stock adjustment of the
        difference, so it gets the same checks and audit trail.
        """
        data = dict(data)
        new_stock = data.pop('stock', None)
        try:
            product = self.get_product(product_id)
            if 'sku' in data and data['sku'] != product.sku:
                self._check_sku_free(data['sku'], exclude_id=product.id)
            self._check_supplier(data)
            product.update_from_dict(data)
            if new_stock is not None and new_stock != product.stock:
                self.stock.adjust(product.id, new_stock - product.stock, notes='Stock set via product update')
            db.session.commit()
        except IntegrityError as e:
            db.session.rollback()
            if 'sku' in data and _is_duplicate_sku(e):
                raise DuplicateSku(data['sku']) from e
            raise
        except Exception:
            db.session.rollback()
            raise
        return product

    def adjust_stock(self, product_id: int, delta: int, notes: str | None = None) -> Product:
        try:
            product = self.stock.adjust(product_id, delta, notes=notes)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        return product

    def delete_product(self, product_id: int) -> None:
        """
        Hard delete. Order lines keep their name/SKU/price snapshot and lose
        the product link; movement history is kept the same way.
        """
        try:
            product = self.get_product(product_id)
            OrderItem.query.filter(OrderItem.product_id == product.id).update(
                {OrderItem.product_id: None}, synchronize_session=False
            )
            StockMovement.query.filter(StockMovement.product_id == product.id).update(
                {StockMovement.product_id: None}, synchronize_session=False
            )
            db.session.delete(product)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        logger.info(f"Deleted product {product_id}")
