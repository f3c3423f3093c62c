import enum

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from store_rating.database import Base


class Role(str, enum.Enum):
    SYSTEM_ADMIN = "SYSTEM_ADMIN"
    NORMAL_USER = "NORMAL_USER"
    STORE_OWNER = "STORE_OWNER"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(60), index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    address = Column(String(400), nullable=False)
    role = Column(Enum(Role, name="user_role"), nullable=False, default=Role.NORMAL_USER)

    # Only set for store owners; one owner per store
    store_id = Column(Integer, ForeignKey("stores.id", ondelete="SET NULL"), unique=True, nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    store = relationship("Store", back_populates="owner")
    ratings = relationship("Rating", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
