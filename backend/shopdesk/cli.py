# Overview: Flask CLI command group for bootstrap, inspection, and maintenance.

# backend/shopdesk/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to shopdesk (PowerShell: $env:FLASK_APP="shopdesk").
# - Use: python -m flask shop <command> [options]
#
# - python -m flask shop init-db
#   Create the stored_collections and session_tokens tables (idempotent).
# - python -m flask shop reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
# - python -m flask shop wipe --yes
#   Delete products, sales, expenses, customers and id counters; revoke sessions.
# - python -m flask shop stats
#   Print collection sizes and the outstanding customer due.
# - python -m flask shop hash-password
#   Print a bcrypt hash to use as SHOP_PASSWORD_HASH.
# - python -m flask shop export --preset "Last Month" --out report.csv
#   Write the CSV report for a preset or --start/--end range.

import click
from flask.cli import with_appcontext

from .extensions import db
from .services import export_service, reporting_service, session_service
from .services.auth_service import hash_password
from .services.shop_service import get_shop, set_shop


@click.group('shop')
def shop_group():
    """Shop bootstrap and maintenance commands."""


@shop_group.command('init-db')
@with_appcontext
def init_db():
    """Create all tables that do not exist yet."""
    db.create_all()
    click.echo("PASS Tables ready.")


@shop_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """
    DANGER: Drop all tables and recreate schema.

    This will DELETE ALL DATA!
    """
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    click.echo("DELETE  Dropping all tables...")
    db.drop_all()

    click.echo("BUILD  Creating all tables...")
    db.create_all()
    set_shop(None)

    click.echo("PASS Database reset complete.")


@shop_group.command('wipe')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def wipe_data(yes):
    """Clear every shop collection and log out every session."""
    if not yes:
        click.confirm("WARN This will DELETE all shop data. Are you sure?", abort=True)

    get_shop().wipe()
    revoked = session_service.revoke_all_sessions()
    click.echo(f"PASS Shop data cleared, {revoked} session(s) revoked.")


@shop_group.command('stats')
@with_appcontext
def stats():
    """Print collection sizes."""
    for key, value in get_shop().stats().items():
        click.echo(f"{key}: {value}")


@shop_group.command('hash-password')
@click.password_option('--password', help='Password to hash')
def hash_password_cmd(password):
    """Print a bcrypt hash for SHOP_PASSWORD_HASH."""
    click.echo(hash_password(password))


@shop_group.command('export')
@click.option('--preset', default=None, help='Report preset, e.g. "This Month"')
@click.option('--start', default=None, help='Range start (YYYY-MM-DD)')
@click.option('--end', default=None, help='Range end (YYYY-MM-DD)')
@click.option('--out', 'out_path', default=None, help='Output file (default: Shop_Report_<start>_to_<end>.csv)')
@with_appcontext
def export_report(preset, start, end, out_path):
    """Write the sales and expenses of a range as CSV."""
    shop = get_shop()
    try:
        start, end, _preset = reporting_service.resolve_range(
            today=shop.today(), preset=preset, start=start, end=end,
        )
    except reporting_service.ReportError as exc:
        raise click.BadParameter(str(exc))

    csv_text = export_service.export_report_csv(
        reporting_service.filter_by_date(shop.sales.list(), start, end),
        reporting_service.filter_by_date(shop.expenses.list(), start, end),
    )
    out_path = out_path or export_service.export_filename(start, end)
    with open(out_path, "w", encoding="utf-8", newline="") as fh:
        fh.write(csv_text)
    click.echo(f"PASS Wrote {out_path}")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(shop_group)
