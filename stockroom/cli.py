"""
Flask CLI commands
"""

import click
from flask import current_app
from tabulate import tabulate

from stockroom.logger import get_logger

logger = get_logger("stockroom.cli")

REORDER_HEADERS = ['Priority', 'SKU', 'Product', 'Stock', 'Reorder Pt', 'Daily Sales',
                   'Days Left', 'Order Qty', 'Supplier']


def format_reorder_table(result, tablefmt='github'):
    """Render a ReorderResult as a text table"""
    rows = []
    for s in result.suggestions:
        record = s.to_dict()
        rows.append([
            record['priority'],
            record['sku'],
            record['productName'],
            record['currentStock'],
            record['reorderPoint'],
            record['dailySales'],
            record['daysOfStock'],
            record['recommendedOrder'],
            record['supplier'],
        ])
    return tabulate(rows, headers=REORDER_HEADERS, tablefmt=tablefmt)


def register_cli(app):

    @app.cli.command('init-db')
    @click.option('--seed-demo', is_flag=True, help='Also insert the demo data set')
    def init_db(seed_demo):
        """Create tables and sequences."""
        from stockroom.build import build_database
        build_database(seed_demo=seed_demo, app=current_app._get_current_object())
        click.echo('Database initialized.')

    @app.cli.command('reorder-report')
    @click.argument('email')
    @click.option('--priority', type=click.Choice(['high', 'medium', 'low']), default=None)
    def reorder_report(email, priority):
        """Print reorder suggestions for the user with EMAIL."""
        from stockroom.data.core.user import User
        from stockroom.services.analytics.reorder_service import ReorderService

        user = User.query.filter_by(email=email.strip().lower()).first()
        if user is None:
            raise click.ClickException(f"No user with email {email}")

        result = ReorderService.get_suggestions(user.id, priority=priority)
        if not result.suggestions:
            click.echo(f"No products need reordering ({result.total_products} products checked).")
            return

        click.echo(format_reorder_table(result))
        click.echo('')
        click.echo(
            f"High: {result.count('high')}  Medium: {result.count('medium')}  "
            f"Low: {result.count('low')}  Stock value: {result.total_value:,.2f}"
        )
