from core.database import Base
from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship
from models.mixins import CreatedAtMixin
from models.types import UTCDateTime

class BlacklistedAccessToken(Base, CreatedAtMixin):
    """
    Access tokens revoked before their natural expiry (logout).

    A row only matters until expires_at; after that the signature check
    rejects the token anyway and the row can be pruned.
    """
    __tablename__ = "token_blacklist"

    #pk
    id = Column(Integer, primary_key=True, index=True)

    #fk
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    #relationships
    user = relationship("User", back_populates="blacklisted_tokens")

    token = Column(String(2048), nullable=False, unique=True, index=True)
    expires_at = Column(UTCDateTime, nullable=False, index=True)

    def __repr__(self):
        return f"<BlacklistedAccessToken(id={self.id}, user_id={self.user_id}, expires_at={self.expires_at})>"
