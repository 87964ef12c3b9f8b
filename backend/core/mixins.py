from sqlalchemy import Column, DateTime, String
from sqlalchemy.sql import func


class TimestampMixin:
    created_at = Column(DateTime, default=func.now(), nullable=False)
    updated_at = Column(DateTime, default=func.now(),
                        onupdate=func.now(), nullable=False)


class RestaurantMixin:
    """Mixin for rows scoped to a single restaurant"""
    restaurant_id = Column(String(64), nullable=False, index=True)
