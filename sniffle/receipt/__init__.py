from flask import Blueprint

bp = Blueprint("receipt", __name__)

from . import routes  # noqa: E402,F401
