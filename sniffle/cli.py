# sniffle/cli.py
import os

import click
import pandas as pd
from flask import current_app
from flask.cli import with_appcontext
from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError

from .database import setup_database
from .extensions import db
from .model import Product


def _product_columns():
    """Column name -> mapped attribute name."""
    return {attr.columns[0].name: attr.key for attr in inspect(Product).column_attrs}

def _is_excel(path):
    return os.path.splitext(path)[1].lower() in {".xlsx"}


@click.command("init-db")
@with_appcontext
def init_db():
    setup_database(current_app._get_current_object())
    click.echo("Database initialised")


@click.command("import-products")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@with_appcontext
def import_products(path):
    df = pd.read_excel(path) if _is_excel(path) else pd.read_csv(path)
    df.columns = df.columns.str.strip()

    columns = _product_columns()
    # ids are assigned by the database, so exported sheets can be re-imported
    pk = [c.name for c in Product.__table__.primary_key.columns]
    columns = {name: attr for name, attr in columns.items() if name not in pk}
    unknown = [c for c in df.columns if c not in columns and c not in pk]
    if unknown:
        click.echo(f"Ignoring columns: {', '.join(unknown)}")

    for record in df.to_dict(orient="records"):
        data = {
            columns[name]: (None if pd.isna(value) else value)
            for name, value in record.items()
            if name in columns
        }
        db.session.add(Product(**data))
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        raise click.ClickException(f"import failed, nothing saved: {getattr(e, 'orig', None) or e}")
    click.echo(f"{len(df)} products imported from {path}")


@click.command("export-products")
@click.argument("path", type=click.Path(dir_okay=False, writable=True))
@with_appcontext
def export_products(path):
    products = db.session.execute(db.select(Product).order_by(Product.product_id)).scalars().all()
    df = pd.DataFrame([p.as_dict() for p in products], columns=list(_product_columns()))
    if _is_excel(path):
        df.to_excel(path, index=False)
    else:
        df.to_csv(path, index=False)
    click.echo(f"{len(df)} products exported to {path}")


def register_cli(app):
    app.cli.add_command(init_db)
    app.cli.add_command(import_products)
    app.cli.add_command(export_products)


@click.command()
@click.option("--host", default="0.0.0.0", show_default=True)
@click.option("--port", type=int, default=None, help="Listen port (defaults to the PORT setting, 5000).")
def main(host, port):
    """Serve the products and receipts API."""
    from . import create_app
    app = create_app()
    app.run(host=host, port=port or app.config["PORT"])
