import io

import pytest

from sniffle import create_app
from sniffle.extensions import db


@pytest.fixture
def receipt_dir(tmp_path):
    return tmp_path / "receipts"


@pytest.fixture
def app(tmp_path, receipt_dir):
    app = create_app(
        {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'test.db'}",
            "RECEIPT_DIRECTORY": str(receipt_dir),
        }
    )
    yield app
    with app.app_context():
        db.session.remove()
        db.engine.dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def upload(client):
    def _upload(name, payload, field="receipt"):
        return client.post(
            "/receipts",
            data={field: (io.BytesIO(payload), name)},
            content_type="multipart/form-data",
        )
    return _upload
