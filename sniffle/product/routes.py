from flask import current_app, jsonify
from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..model import Product
from . import bp


def get_product_list():
    return db.session.execute(db.select(Product).order_by(Product.product_id)).scalars().all()


# GET /products
@bp.get("")
def list_products():
    try:
        products = get_product_list()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("querying products failed")
        return "", 500

    try:
        return jsonify([p.as_dict() for p in products])
    except (TypeError, ValueError):
        # one unserialisable row fails this request only
        current_app.logger.exception("encoding %d products failed", len(products))
        return "", 500
