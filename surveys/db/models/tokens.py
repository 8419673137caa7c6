from sqlalchemy import Column, Integer, String, DateTime, LargeBinary, UniqueConstraint
from .base import Base, now_utc


class UserTokenCache(Base):
    __tablename__ = 'user_token_caches'

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_object_id = Column(String(38), nullable=False)
    client_id = Column(String(64), nullable=False)

    # Serialized TokenCache contents
    cache_bits = Column(LargeBinary, nullable=True)
    last_write = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc, nullable=False)

    __table_args__ = (
        UniqueConstraint('user_object_id', 'client_id', name='uq_user_token_caches_user_client'),
    )
