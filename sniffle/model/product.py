# sniffle/model/product.py
from sqlalchemy import inspect

from ..extensions import db


class Product(db.Model):
    __tablename__ = "products"
    product_id = db.Column("productId", db.Integer, primary_key=True)
    manufacturer = db.Column("manufacturer", db.String(255))
    sku = db.Column("sku", db.String(64))
    upc = db.Column("upc", db.String(64))
    price_per_unit = db.Column("pricePerUnit", db.Numeric(13, 2))
    quantity_on_hand = db.Column("quantityOnHand", db.Integer, default=0)
    product_name = db.Column("productName", db.String(255))

    def as_dict(self):
        """Row as {column name: value}, in table column order."""
        attrs = inspect(self).mapper.column_attrs
        return {attr.columns[0].name: getattr(self, attr.key) for attr in attrs}
