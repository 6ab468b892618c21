"""
Flask CLI commands for order management.

Commands:
- flask list-orders: Print the current order list
- flask delete-order ID: Delete an order after confirmation
"""

import asyncio

import click
from flask import current_app

from retail_panel.services.order_list_service import (
    AlwaysConfirm, ConfirmationPort, OrderListController
)


class ClickConfirmation(ConfirmationPort):
    """Confirmation through an interactive terminal prompt."""

    def confirm(self, message: str) -> bool:
        return click.confirm(message, default=False)


def _print_rows(rows):
    if not rows:
        click.echo('No orders found.')
        return
    for row in rows:
        click.echo(f"{row['label']:>8}  {row['status']:<10}  {row['created']:<10}  {row['item_count']} items")


def init_cli_commands(app):
    """Register CLI commands with Flask app."""

    @app.cli.command('list-orders')
    def list_orders():
        """Print all orders known to the backend."""
        controller = OrderListController()

        async def run():
            async with current_app.extensions['panel_api_factory']() as api:
                await controller.refresh(api)

        asyncio.run(run())
        _print_rows(controller.rows())

    @app.cli.command('delete-order')
    @click.argument('order_id', type=int)
    @click.option('--yes', is_flag=True, help='Skip the confirmation prompt')
    def delete_order(order_id, yes):
        """Delete order ORDER_ID."""
        controller = OrderListController(confirm_message=f'Delete order #{order_id}?')
        confirmation = AlwaysConfirm() if yes else ClickConfirmation()

        async def run():
            async with current_app.extensions['panel_api_factory']() as api:
                return await controller.delete_order(api, order_id, confirmation)

        if asyncio.run(run()):
            click.echo(click.style(f'Order #{order_id} deleted.', fg='green'))
            _print_rows(controller.rows())
        else:
            click.echo(click.style(f'Order #{order_id} was not deleted.', fg='yellow'))
