import click
from flask import Flask
from config import config


def create_app(config_name='default'):
    """Application factory — creates and configures the Flask app."""
    app = Flask(__name__)
    app.config.from_object(config[config_name])

    # ── Logging ───────────────────────────────────────────────────
    from app.utils.logging import setup_logging
    setup_logging(app)

    # ── Document store client ─────────────────────────────────────
    from app.store import init_store
    init_store(app)

    # ── Blueprints ────────────────────────────────────────────────
    from app.main import main as main_blueprint
    app.register_blueprint(main_blueprint)

    from app.cart import cart as cart_blueprint
    app.register_blueprint(cart_blueprint, url_prefix='/cart')

    from app.orders import orders as orders_blueprint
    app.register_blueprint(orders_blueprint, url_prefix='/orders')

    # ── Error Handlers ────────────────────────────────────────────
    @app.errorhandler(404)
    def not_found(e):
        from flask import render_template
        return render_template('errors/404.html', title='Page Not Found'), 404

    @app.errorhandler(500)
    def internal_error(e):
        from flask import render_template
        return render_template('errors/500.html', title='Server Error'), 500

    # ── Context Processor ─────────────────────────────────────────
    @app.context_processor
    def inject_config():
        """Make app.config available in templates (e.g. config.FLASH_DISMISS_SECONDS)."""
        return dict(config=app.config)

    # ── CLI Commands ──────────────────────────────────────────────
    register_commands(app)

    # ── ProxyFix (HTTPS termination at the load balancer) ─────────
    from werkzeug.middleware.proxy_fix import ProxyFix
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_prefix=1)

    return app


def register_commands(app):
    """Register custom Flask CLI commands."""
    from app.errors import FetchError

    @app.cli.command('list-orders')
    def list_orders():
        """Show active orders, most recent first."""
        from app.orders.fulfillment import list_active_orders
        from app.store import get_store

        try:
            active = list_active_orders(get_store())
        except FetchError as e:
            raise click.ClickException(str(e))

        if not active:
            click.echo('No orders available.')
            return
        _echo_orders(active)

    @app.cli.command('complete-order')
    @click.argument('order_id')
    @click.option('--yes', is_flag=True, help='Skip the confirmation prompt')
    def complete_order_cmd(order_id, yes):
        """Mark an order as completed (irreversible)."""
        from app.orders.fulfillment import (
            list_active_orders, complete_order, remove_completed
        )
        from app.store import get_store

        if not yes and not click.confirm(
                f'Are you sure you want to complete order {order_id}?'):
            click.echo('Order not completed.')
            return

        store = get_store()
        try:
            complete_order(store, order_id)
        except FetchError as e:
            raise click.ClickException(str(e))
        click.echo(f'✅  Order {order_id} marked as completed.')

        # The deletion already happened; a failed re-list only loses the count.
        try:
            active = list_active_orders(store)
        except FetchError as e:
            click.echo(f'⚠️   Could not list remaining orders: {e}')
            return
        remaining = remove_completed(active, order_id)
        click.echo(f'ℹ️   {len(remaining)} active order(s) remaining.')

    @app.cli.command('clear-cart')
    @click.argument('session_id')
    @click.option('--yes', is_flag=True, help='Skip the confirmation prompt')
    def clear_cart_cmd(session_id, yes):
        """
        Remove every cart entry for SESSION_ID.
        Used to sweep carts left behind when checkout placed the order
        but could not clear the cart (see checkout.cart_clear_failed logs).
        """
        from app.store import get_store

        if not yes and not click.confirm(f'Clear all cart entries for {session_id}?'):
            click.echo('Cart not cleared.')
            return

        try:
            get_store().clear_cart(session_id)
        except FetchError as e:
            raise click.ClickException(str(e))
        app.logger.info(f"Cart for session {session_id} cleared from CLI")
        click.echo(f'✅  Cart cleared for {session_id}.')


def _echo_orders(active):
    click.echo(f'{"Serial":<8} {"Order ID":<26} {"Date":<20} {"Customer":<20} {"Total":>10}')
    click.echo('─' * 88)
    for o in active:
        when = o.order_date.strftime('%Y-%m-%d %H:%M') if o.order_date else '-'
        click.echo(
            f'{o.serial_number or "-":<8} {o.id or "-":<26} {when:<20} '
            f'{o.customer.name:<20} {o.grand_total:>10.2f}'
        )
