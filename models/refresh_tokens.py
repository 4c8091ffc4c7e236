from core.database import Base
from sqlalchemy import Column, String, Integer, ForeignKey, Index
from sqlalchemy.orm import relationship
from models.mixins import CreatedAtMixin
from models.types import UTCDateTime

class RefreshToken(Base, CreatedAtMixin):
    """
    One row per logged-in device.

    Only the SHA-256 digest of the token is kept; the plaintext is handed to
    the client once and cannot be recovered from this table. A row is valid
    while revoked_at is NULL and expires_at is in the future.
    """
    __tablename__ = "refresh_tokens"

    #pk
    id = Column(Integer, primary_key=True, index=True)

    #fk
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    #relationships
    user = relationship("User", back_populates="refresh_tokens")

    token_hash = Column(String(64), nullable=False, unique=True, index=True)
    device_name = Column(String(100), nullable=True)
    ip_address = Column(String(45), nullable=True)
    expires_at = Column(UTCDateTime, nullable=False)
    revoked_at = Column(UTCDateTime, nullable=True)
    last_used_at = Column(UTCDateTime, nullable=True)

    __table_args__ = (
        Index("ix_refresh_tokens_user_revoked", "user_id", "revoked_at"),
    )

    def __repr__(self):
        return f"<RefreshToken(id={self.id}, user_id={self.user_id}, revoked_at={self.revoked_at})>"
