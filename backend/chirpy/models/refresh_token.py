# chirpy/models/refresh_token.py
from sqlalchemy import Column, DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from chirpy.core.base import Base


class RefreshToken(Base):
    __tablename__ = "refresh_tokens"

    # 32 random bytes, hex encoded. The token value is its own lookup key.
    token = Column(String(64), primary_key=True)

    user_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Absolute expiration, fixed at creation
    expires_at = Column(DateTime(timezone=True), nullable=False)

    # If set, token is no longer valid
    revoked_at = Column(DateTime(timezone=True), nullable=True)

    user = relationship("User", back_populates="refresh_tokens")
