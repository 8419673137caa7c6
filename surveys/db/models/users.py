from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from .base import Base, now_utc


class Tenant(Base):
    __tablename__ = 'tenants'
    id = Column(Integer, primary_key=True, autoincrement=True)
    # Issuer claim of the tenant's identity provider
    issuer_value = Column(String(1000), nullable=False, unique=True)
    created_at = Column(DateTime(timezone=True), default=now_utc, nullable=False)


class User(Base):
    __tablename__ = 'users'
    id = Column(Integer, primary_key=True, autoincrement=True)
    object_id = Column(String(38), nullable=False, unique=True, index=True)
    display_name = Column(String, nullable=True)
    email = Column(String, nullable=True)
    tenant_id = Column(Integer, ForeignKey('tenants.id'), nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc, nullable=False)
