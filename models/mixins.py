from sqlalchemy import Column
from models.types import UTCDateTime, utcnow


class CreatedAtMixin:
    created_at = Column(UTCDateTime, default=utcnow, nullable=False)

class UpdatedAtMixin:
    updated_at = Column(UTCDateTime, default=utcnow, onupdate=utcnow, nullable=False)
