import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from ipv.config.database import Base, get_db
from ipv.core.auth.service import AuthService
from ipv.main import create_app
from ipv.shared.database import models  # noqa: F401
from ipv.shared.database.models import User, IPV, Product

@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()

@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)

@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()

@pytest.fixture
def app(session_factory):
    app = create_app()

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    return app

@pytest.fixture
def client(app):
    return TestClient(app)

def _create_user(db, email, role):
    user = User(
        email=email,
        password_hash=AuthService.get_password_hash("secreto123"),
        role=role,
        is_active=True
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user

def _auth_headers(user):
    token = AuthService.create_access_token({"user_id": user.id, "email": user.email, "role": user.role})
    return {"Authorization": f"Bearer {token}"}

@pytest.fixture
def admin(db):
    return _create_user(db, "admin@ipv.local", "admin")

@pytest.fixture
def seller(db):
    return _create_user(db, "vendedor@ipv.local", "user")

@pytest.fixture
def other_seller(db):
    return _create_user(db, "otro@ipv.local", "user")

@pytest.fixture
def admin_headers(admin):
    return _auth_headers(admin)

@pytest.fixture
def seller_headers(seller):
    return _auth_headers(seller)

@pytest.fixture
def other_headers(other_seller):
    return _auth_headers(other_seller)

@pytest.fixture
def ipv(db, admin, seller):
    """IPV abierto del vendedor con Refresco (85.00, 10) y Galletas (40.00, 5)"""
    ipv = IPV(name="Cafetería", description="Turno mañana", user_id=seller.id, created_by=admin.id)
    db.add(ipv)
    db.commit()
    db.refresh(ipv)

    db.add_all([
        Product(ipv_id=ipv.id, name="Refresco", price=85, initial_stock=10, current_stock=10),
        Product(ipv_id=ipv.id, name="Galletas", price=40, initial_stock=5, current_stock=5),
    ])
    db.commit()
    return ipv

@pytest.fixture
def products(db, ipv):
    rows = db.query(Product).filter(Product.ipv_id == ipv.id).all()
    return {p.name: p for p in rows}
