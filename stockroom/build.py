#!/usr/bin/env python3
"""
Build orchestrator for stockroom
Creates tables and counters, and optionally loads demo data
"""

import json
import os
from pathlib import Path

from stockroom import create_app, db
from stockroom.logger import get_logger

logger = get_logger("stockroom.build")

DEMO_DATA_FILE = Path(__file__).parent / 'data' / 'build_data_demo.json'


def build_models():
    """Create all tables and the sequence counter tables"""
    from stockroom.data.core.sequences import OrderNumberSequence

    db.create_all()
    OrderNumberSequence.create_sequence_if_not_exists()
    logger.info("Database tables and sequences created")


def insert_demo_data(data_file=DEMO_DATA_FILE):
    """
    Load demo suppliers, products and orders for a demo user.

    Skipped when the demo user already exists. Orders go through the order
    manager, so stock levels and movements come out consistent.

    Returns:
        User: the demo user
    """
    from stockroom.business.core.validators import (
        validate_order_payload,
        validate_product_payload,
        validate_supplier_payload,
    )
    from stockroom.business.inventory.catalog_manager import CatalogManager
    from stockroom.business.orders.order_manager import OrderManager
    from stockroom.data.core.user import User

    with open(data_file, 'r') as f:
        demo = json.load(f)

    email = os.environ.get('DEMO_USER_EMAIL', demo['user']['email'])
    user = User.query.filter_by(email=email).first()
    if user is not None:
        logger.info(f"Demo user {email} already present, skipping demo data")
        return user

    user = User(name=demo['user']['name'], email=email)
    user.set_password(os.environ.get('DEMO_USER_PASSWORD', 'Demo12345'))
    db.session.add(user)
    db.session.commit()

    catalog = CatalogManager(user.id)
    suppliers = {}
    for entry in demo['suppliers']:
        supplier = catalog.create_supplier(validate_supplier_payload(entry))
        suppliers[supplier.name] = supplier.id

    products = {}
    for entry in demo['products']:
        entry = dict(entry)
        supplier_name = entry.pop('supplier', None)
        entry['supplier_id'] = suppliers.get(supplier_name)
        product = catalog.create_product(validate_product_payload(entry))
        products[product.sku] = product.id

    orders = OrderManager(user.id)
    for entry in demo['orders']:
        payload = {
            'customer': entry['customer'],
            'payment_method': entry['payment_method'],
            'items': [{'product_id': products[i['sku']], 'quantity': i['quantity']} for i in entry['items']],
        }
        order = orders.create_order(validate_order_payload(payload), processed_by_id=user.id)
        if entry.get('status', 'pending') != order.status:
            orders.update_status(order.id, entry['status'])

    logger.info(f"Inserted demo data: {len(suppliers)} suppliers, {len(products)} products, "
                f"{len(demo['orders'])} orders")
    return user


def build_database(seed_demo=False, app=None):
    """
    Args:
        seed_demo (bool): Also insert the demo data set
        app: Flask app to build against (a new one is created when omitted)
    """
    app = app or create_app()

    with app.app_context():
        logger.info(f"Starting database build (seed_demo={seed_demo})")
        build_models()
        if seed_demo:
            try:
                insert_demo_data()
            except Exception as e:
                logger.error(f"Demo data insertion failed: {e}")
                raise
        logger.info("Database build completed successfully")
