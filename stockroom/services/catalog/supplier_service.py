"""
Supplier Service
"""

from typing import List

from stockroom.business.core.errors import SupplierNotFound
from stockroom.data.catalog.supplier import Supplier


class SupplierService:

    @staticmethod
    def list_suppliers(user_id: int) -> List[Supplier]:
        return Supplier.owned_by(user_id).order_by(Supplier.name).all()

    @staticmethod
    def get_supplier(user_id: int, supplier_id: int) -> Supplier:
        supplier = Supplier.get_owned(supplier_id, user_id)
        if supplier is None:
            raise SupplierNotFound(supplier_id)
        return supplier
