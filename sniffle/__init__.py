from flask import Flask
from werkzeug.exceptions import HTTPException

from .config import Config
from .database import setup_database
from .extensions import db, cors
from .receipt.storage import ReceiptDirectory


def create_app(overrides=None):
    app = Flask(__name__, instance_relative_config=True)

    app.config.from_object(Config)
    Config.init_app(app)
    if overrides:
        app.config.update(overrides)

    app.logger.setLevel(app.config["LOG_LEVEL"])

    # Init extensions
    db.init_app(app)

    # registered before Flask-Cors so it runs after it; preflight values win
    @app.after_request
    def advertise_cors(resp):
        resp.headers.setdefault("Access-Control-Allow-Methods", ", ".join(app.config["CORS_METHODS"]))
        resp.headers.setdefault("Access-Control-Allow-Headers", ", ".join(app.config["CORS_HEADERS"]))
        return resp

    cors.init_app(
        app,
        resources={r"/*": {"origins": "*"}},
        send_wildcard=True,
        methods=app.config["CORS_METHODS"],
        allow_headers=app.config["CORS_HEADERS"],
    )

    receipts = ReceiptDirectory(app.config["RECEIPT_DIRECTORY"])
    receipts.ensure()
    app.extensions["receipt_directory"] = receipts
    app.logger.info("receipts stored in %s", receipts.root)

    setup_database(app)

    # Register blueprints
    base = app.config["API_BASE_PATH"].rstrip("/")
    from .receipt import bp as receipt_bp; app.register_blueprint(receipt_bp, url_prefix=f"{base}/receipts")
    from .product import bp as product_bp; app.register_blueprint(product_bp, url_prefix=f"{base}/products")

    from .cli import register_cli
    register_cli(app)

    @app.errorhandler(HTTPException)
    def empty_error(e):
        # status code only, no error page
        resp = e.get_response()
        resp.set_data(b"")
        return resp

    for rule in app.url_map.iter_rules():
        app.logger.debug("%s %s", sorted(rule.methods), rule.rule)

    return app
