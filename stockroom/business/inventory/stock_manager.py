from __future__ import annotations

from collections import OrderedDict

from sqlalchemy import update

from stockroom import db
from stockroom.business.core.errors import InsufficientStock, ProductNotFound
from stockroom.data.catalog.product import Product
from stockroom.data.inventory.stock_movement import StockMovement
from stockroom.logger import get_logger

logger = get_logger("stockroom.business.inventory.stock_manager")


def aggregate_quantities(lines) -> OrderedDict:
    """
    Sum (product_id, quantity) pairs per product, keeping first-seen order.
    Two lines for the same product must be checked against stock together.
    """
    totals: OrderedDict = OrderedDict()
    for product_id, quantity in lines:
        totals[product_id] = totals.get(product_id, 0) + quantity
    return totals


class StockManager:
    """
    The only writer of Product.stock.

    Every method works inside the caller's session transaction and never
    commits; the caller commits on success and rolls back on any exception,
    which is what keeps a multi-product mutation all-or-nothing.

    Decrements are conditional UPDATEs (`... WHERE stock >= :qty`) so two
    concurrent writers cannot both pass the availability check.
    """

    def __init__(self, user_id: int):
        self.user_id = user_id

    def _load_products(self, product_ids) -> dict[int, Product]:
        if not product_ids:
            return {}
        products = Product.owned_by(self.user_id).filter(Product.id.in_(list(product_ids))).all()
        return {p.id: p for p in products}

    def _record(self, product_id: int, delta: int, movement_type: str,
                order_id: int | None = None, notes: str | None = None) -> StockMovement:
        movement = StockMovement(
            user_id=self.user_id,
            product_id=product_id,
            order_id=order_id,
            movement_type=movement_type,
            quantity_delta=delta,
            notes=notes,
        )
        db.session.add(movement)
        return movement

    def _conditional_decrement(self, product: Product, quantity: int) -> None:
        result = db.session.execute(
            update(Product)
            .where(
                Product.id == product.id,
                Product.user_id == self.user_id,
                Product.stock >= quantity,
            )
            .values(stock=Product.stock - quantity)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            # Another transaction consumed the stock after our availability check
            db.session.refresh(product, ['stock'])
            logger.warning(
                f"Conditional decrement lost race for product {product.id}: "
                f"available={product.stock} requested={quantity}"
            )
            raise InsufficientStock(product.id, product.name, product.stock, quantity)
        db.session.expire(product, ['stock'])

    def _increment(self, product: Product, quantity: int) -> None:
        db.session.execute(
            update(Product)
            .where(Product.id == product.id, Product.user_id == self.user_id)
            .values(stock=Product.stock + quantity)
            .execution_options(synchronize_session=False)
        )
        db.session.expire(product, ['stock'])

    def check_availability(self, quantities: dict[int, int]) -> dict[int, Product]:
        """
        Validate every product before any write.

        Raises:
            ProductNotFound: a product id is unknown in this owner scope
            InsufficientStock: a product cannot cover its summed quantity
        """
        products = self._load_products(quantities.keys())
        for product_id, quantity in quantities.items():
            product = products.get(product_id)
            if product is None:
                raise ProductNotFound(product_id)
            if product.stock < quantity:
                raise InsufficientStock(product.id, product.name, product.stock, quantity)
        return products

    def reserve(self, quantities: dict[int, int], *, movement_type: str,
                order_id: int | None = None) -> dict[int, Product]:
        """Pre-validate all products, then conditionally decrement each one."""
        products = self.check_availability(quantities)
        for product_id, quantity in quantities.items():
            self._conditional_decrement(products[product_id], quantity)
            self._record(product_id, -quantity, movement_type, order_id=order_id)
        logger.debug(f"Reserved stock for {len(quantities)} product(s), order={order_id}")
        return products

    def release(self, quantities: dict[int, int], *, movement_type: str,
                order_id: int | None = None) -> int:
        """
        Return stock to products. Products deleted since the order was placed
        are skipped. Returns the number of products restored.
        """
        products = self._load_products(quantities.keys())
        restored = 0
        for product_id, quantity in quantities.items():
            product = products.get(product_id)
            if product is None:
                logger.warning(f"Skipping stock restore for missing product {product_id} (order={order_id})")
                continue
            self._increment(product, quantity)
            self._record(product_id, quantity, movement_type, order_id=order_id)
            restored += 1
        return restored

    def adjust(self, product_id: int, delta: int, *, notes: str | None = None) -> Product:
        """
        Apply a direct signed stock change.

        Raises:
            ProductNotFound: unknown product in this scope
            InsufficientStock: the change would make stock negative
        """
        product = Product.get_owned(product_id, self.user_id)
        if product is None:
            raise ProductNotFound(product_id)

        if delta < 0:
            if product.stock < -delta:
                raise InsufficientStock(product.id, product.name, product.stock, -delta)
            self._conditional_decrement(product, -delta)
        elif delta > 0:
            self._increment(product, delta)
        else:
            return product

        self._record(product.id, delta, StockMovement.ADJUSTMENT, notes=notes)
        logger.info(f"Adjusted stock of product {product.id} by {delta:+d}")
        return product
