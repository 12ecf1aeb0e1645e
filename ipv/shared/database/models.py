from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text, ForeignKey, Numeric, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ipv.config.database import Base

class TimestampMixin:
    """Mixin para timestamps automáticos"""
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

# ===== USUARIOS =====

class User(Base):
    """Perfil de usuario (admin o usuario de ventas)"""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(50), default='user', nullable=False)  # 'admin' | 'user'
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, server_default=func.current_timestamp())

    # Relationships
    assigned_ipvs = relationship("IPV", back_populates="user", foreign_keys="IPV.user_id")
    created_ipvs = relationship("IPV", back_populates="creator", foreign_keys="IPV.created_by")
    catalog_products = relationship("CatalogProduct", back_populates="admin", cascade="all, delete-orphan")

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

# ===== CATÁLOGO =====

class CatalogProduct(Base, TimestampMixin):
    """Producto reutilizable del catálogo de un administrador (no ligado a un IPV)"""
    __tablename__ = "catalog_products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    price = Column(Numeric(10, 2), nullable=False, default=0)
    description = Column(Text)
    admin_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    # Relationships
    admin = relationship("User", back_populates="catalog_products")

# ===== INVENTARIOS =====

class IPV(Base, TimestampMixin):
    """Inventario de productos de venta asignado a un usuario"""
    __tablename__ = "ipvs"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, default="")
    status = Column(String(20), default='open', nullable=False)  # 'open' | 'closed'
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), index=True)
    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"))

    # Relationships
    user = relationship("User", back_populates="assigned_ipvs", foreign_keys=[user_id])
    creator = relationship("User", back_populates="created_ipvs", foreign_keys=[created_by])
    products = relationship("Product", back_populates="ipv", cascade="all, delete-orphan")
    sales = relationship("Sale", back_populates="ipv", cascade="all, delete-orphan")
    bill_counts = relationship("BillCount", back_populates="ipv", cascade="all, delete-orphan")

    @property
    def is_open(self) -> bool:
        return self.status == "open"

class Product(Base, TimestampMixin):
    """Producto asignado a un IPV con su stock"""
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    ipv_id = Column(Integer, ForeignKey("ipvs.id", ondelete="CASCADE"), nullable=False, index=True)
    catalog_product_id = Column(Integer, ForeignKey("catalog_products.id", ondelete="SET NULL"))
    name = Column(String(255), nullable=False)
    price = Column(Numeric(10, 2), nullable=False, default=0)
    initial_stock = Column(Integer, nullable=False, default=0)
    current_stock = Column(Integer, nullable=False, default=0)

    # Relationships
    ipv = relationship("IPV", back_populates="products")
    sales = relationship("Sale", back_populates="product", cascade="all, delete-orphan")

# ===== VENTAS =====

class Sale(Base):
    """Venta confirmada de una línea de producto"""
    __tablename__ = "sales"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    ipv_id = Column(Integer, ForeignKey("ipvs.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"))
    quantity = Column(Integer, nullable=False)
    payment_method = Column(String(20), nullable=False)  # 'cash' | 'transfer'
    unit_price = Column(Numeric(10, 2), nullable=False)
    total_amount = Column(Numeric(10, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Relationships
    product = relationship("Product", back_populates="sales")
    ipv = relationship("IPV", back_populates="sales")

class BillCount(Base, TimestampMixin):
    """Conteo de billetes por denominación para el arqueo de caja"""
    __tablename__ = "bill_counts"

    id = Column(Integer, primary_key=True, index=True)
    ipv_id = Column(Integer, ForeignKey("ipvs.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    denomination = Column(Integer, nullable=False)
    count = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        UniqueConstraint('ipv_id', 'user_id', 'denomination', name='bill_counts_unique_per_actor'),
    )

    # Relationships
    ipv = relationship("IPV", back_populates="bill_counts")
