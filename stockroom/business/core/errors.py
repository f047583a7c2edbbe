"""
Domain exceptions for stockroom business logic

These exceptions represent business rule violations and domain-specific errors.
They are raised by the business layer and translated to HTTP responses by
stockroom.presentation.errors.
"""


class StockroomError(Exception):
    """Base exception for all stockroom domain errors"""

    status_code = 400

    def __init__(self, message=None):
        super().__init__(message or self.__class__.__doc__)
        self.message = message or self.__class__.__doc__

    def to_dict(self):
        return {'success': False, 'message': self.message, 'error': self.__class__.__name__}


class ValidationError(StockroomError):
    """Malformed or out-of-range input"""

    def __init__(self, errors, message='Validation failed'):
        if isinstance(errors, str):
            errors = {'_': errors}
        super().__init__(message)
        self.errors = dict(errors)

    def to_dict(self):
        result = super().to_dict()
        result['errors'] = self.errors
        return result


class NotFoundError(StockroomError):
    """Requested record does not exist in the caller's scope"""

    status_code = 404
    entity = 'Record'

    def __init__(self, record_id=None, message=None):
        self.record_id = record_id
        super().__init__(message or f"{self.entity} not found: {record_id}")


class ProductNotFound(NotFoundError):
    """Product not found"""
    entity = 'Product'


class OrderNotFound(NotFoundError):
    """Order not found"""
    entity = 'Order'


class SupplierNotFound(NotFoundError):
    """Supplier not found"""
    entity = 'Supplier'


class ConflictError(StockroomError):
    """Request conflicts with the current state of a record"""

    status_code = 409


class InsufficientStock(ConflictError):
    """Raised when a product cannot cover the requested quantity"""

    def __init__(self, product_id, product_name, available, requested):
        self.product_id = product_id
        self.product_name = product_name
        self.available = available
        self.requested = requested
        super().__init__(
            f"Insufficient stock for {product_name}. Available: {available}, Requested: {requested}"
        )

    def to_dict(self):
        result = super().to_dict()
        result['product'] = {
            'id': self.product_id,
            'name': self.product_name,
            'available': self.available,
            'requested': self.requested,
        }
        return result


class DuplicateSku(ConflictError):
    """Raised when a SKU is already used by another product of the same owner"""

    def __init__(self, sku):
        self.sku = sku
        super().__init__(f"A product with SKU '{sku}' already exists")

    def to_dict(self):
        result = super().to_dict()
        result['sku'] = self.sku
        return result


class InvalidTransition(StockroomError):
    """Raised when an order status change is not allowed"""
