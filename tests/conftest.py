import os

# configure the app before anything from the package is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["APP_ENV"] = "development"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"
os.environ["CELERY_BROKER_URL"] = "memory://"
os.environ["CELERY_RESULT_BACKEND"] = "cache+memory://"
os.environ["SMTP_HOST"] = ""
os.environ["CLOUDINARY_CLOUD_NAME"] = ""

from decimal import Decimal  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from marketplace.api import create_app  # noqa: E402
from marketplace.api.auth import create_access_token  # noqa: E402
from marketplace.data.database import Base, SessionLocal, engine  # noqa: E402
from marketplace.data.models import ProductModel, UserModel  # noqa: E402


class FakeNotifier:
    def __init__(self):
        self.sent = []

    def send_order_confirmation(self, email, order):
        self.sent.append((email, order))
        return True


class FakeImages:
    """Stands in for ImageClient; hands out predictable image records."""

    def __init__(self):
        self.uploaded = []
        self.deleted = []

    def upload_many(self, uploads):
        out = []
        for up in uploads:
            n = len(self.uploaded) + 1
            record = {
                "url": f"https://img.test/{n}.jpg",
                "public_id": f"img_{n}",
                "width": 800,
                "height": 600,
                "format": "jpg",
            }
            self.uploaded.append(record)
            out.append(record)
        return out

    def delete_many(self, public_ids):
        self.deleted.extend(public_ids)
        return []


@pytest.fixture(autouse=True)
def tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db():
    session = SessionLocal()
    yield session
    session.close()


def make_user(db, name="Alice", email=None) -> UserModel:
    user = UserModel(name=name, email=email or f"{name.lower()}@example.com")
    db.add(user)
    db.commit()
    return user


def make_product(db, seller, title="Vintage Camera", price="10.00", status="available", **extra) -> ProductModel:
    fields = dict(
        title=title,
        description=f"{title} in good shape",
        category="Electronics",
        price=Decimal(price),
        condition="Good",
        location="Berlin",
        images=[],
        seller_id=seller.id,
        status=status,
    )
    fields.update(extra)
    product = ProductModel(**fields)
    db.add(product)
    db.commit()
    return product


@pytest.fixture()
def seller(db):
    return make_user(db, "Sam")


@pytest.fixture()
def buyer(db):
    return make_user(db, "Bea")


@pytest.fixture()
def notifier():
    return FakeNotifier()


@pytest.fixture()
def images():
    return FakeImages()


@pytest.fixture()
def app():
    return create_app()


@pytest.fixture()
def client(app):
    return TestClient(app, raise_server_exceptions=False)


def auth_header(user) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}
