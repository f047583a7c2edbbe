from __future__ import annotations

from stockroom import db
from stockroom.business.core.errors import OrderNotFound, ValidationError
from stockroom.business.inventory.stock_manager import StockManager, aggregate_quantities
from stockroom.business.orders.state_machine import OrderStateMachine
from stockroom.data.core.sequences import OrderNumberSequence
from stockroom.data.inventory.stock_movement import StockMovement
from stockroom.data.orders.order import Order
from stockroom.data.orders.order_item import OrderItem
from stockroom.logger import get_logger

logger = get_logger("stockroom.business.orders.order_manager")

# Allowed difference between a client-computed total and the server total
TOTAL_TOLERANCE = 0.01


class OrderManager:
    """
    Order lifecycle operations that move stock.

    Each public method is one transaction: it commits on success and rolls
    the session back on any exception before re-raising, so a failed call
    leaves neither stock nor orders changed.
    """

    def __init__(self, user_id: int):
        self.user_id = user_id
        self.stock = StockManager(user_id)

    def _get_order(self, order_id: int) -> Order:
        order = Order.get_owned(order_id, self.user_id)
        if order is None:
            raise OrderNotFound(order_id)
        return order

    @staticmethod
    def _item_quantities(order: Order) -> dict[int, int]:
        lines = []
        for item in order.items:
            if item.product_id is None:
                logger.warning(
                    f"Order {order.order_number}: item {item.sku} refers to a deleted product, skipping stock change"
                )
                continue
            lines.append((item.product_id, item.quantity))
        return aggregate_quantities(lines)

    def create_order(self, payload: dict, processed_by_id: int | None = None) -> Order:
        """
        Create an order from a validated payload (see validate_order_payload).

        Raises:
            ProductNotFound, InsufficientStock, ValidationError
        """
        try:
            quantities = aggregate_quantities(payload['items'])
            products = self.stock.check_availability(quantities)

            order = Order(
                user_id=self.user_id,
                order_number=OrderNumberSequence.get_next_order_number(),
                customer_name=payload['customer_name'],
                customer_email=payload['customer_email'],
                customer_phone=payload.get('customer_phone'),
                customer_address=payload.get('customer_address'),
                payment_method=payload['payment_method'],
                payment_status=payload.get('payment_status') or 'pending',
                transaction_id=payload.get('transaction_id'),
                notes=payload.get('notes'),
                status=OrderStateMachine.PENDING,
                processed_by_id=processed_by_id,
            )

            total = 0.0
            for product_id, quantity in payload['items']:
                product = products[product_id]
                price = round(float(product.price), 2)
                order.items.append(OrderItem(
                    product_id=product.id,
                    product_name=product.name,
                    sku=product.sku,
                    quantity=quantity,
                    price=price,
                ))
                total += price * quantity
            order.total_amount = round(total, 2)

            client_total = payload.get('client_total')
            if client_total is not None and abs(float(client_total) - order.total_amount) > TOTAL_TOLERANCE:
                raise ValidationError({
                    'totalAmount': f"Total mismatch: expected {order.total_amount:.2f}, got {float(client_total):.2f}"
                })

            db.session.add(order)
            db.session.flush()

            self.stock.reserve(quantities, movement_type=StockMovement.ORDER_CREATED, order_id=order.id)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        logger.info(f"Created order {order.order_number} with {len(order.items)} item(s), total={order.total_amount:.2f}")
        return order

    def update_status(self, order_id: int, new_status: str) -> Order:
        """
        Move an order to `new_status`, applying the stock effect of the change.

        Raises:
            OrderNotFound, InvalidTransition, InsufficientStock (when leaving cancelled)
        """
        try:
            order = self._get_order(order_id)
            change = OrderStateMachine.validate_transition(order.status, new_status)
            if change.is_noop:
                return order

            if change.releases_stock:
                self.stock.release(
                    self._item_quantities(order),
                    movement_type=StockMovement.ORDER_CANCELLED,
                    order_id=order.id,
                )
            elif change.reacquires_stock:
                self.stock.reserve(
                    self._item_quantities(order),
                    movement_type=StockMovement.ORDER_REACTIVATED,
                    order_id=order.id,
                )

            order.status = new_status
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        logger.info(f"Order {order.order_number}: {change.from_status} -> {change.to_status}")
        return order
