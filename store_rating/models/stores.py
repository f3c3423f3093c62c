from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from store_rating.database import Base


class Store(Base):
    __tablename__ = "stores"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(60), nullable=False, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    address = Column(String(400), nullable=False)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    owner = relationship("User", back_populates="store", uselist=False, passive_deletes=True)
    ratings = relationship("Rating", back_populates="store", cascade="all, delete-orphan", passive_deletes=True)
