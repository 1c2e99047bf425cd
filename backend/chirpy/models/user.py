# chirpy/models/user.py
import uuid

from sqlalchemy import Boolean, Column, DateTime, String, Uuid, func
from sqlalchemy.orm import relationship

from chirpy.core.base import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)

    # Set by the Polka "user.upgraded" webhook
    is_chirpy_red = Column(Boolean, nullable=False, default=False, server_default="false")

    chirps = relationship(
        "Chirp",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    refresh_tokens = relationship(
        "RefreshToken",
        back_populates="user",
        cascade="all, delete-orphan",
    )
