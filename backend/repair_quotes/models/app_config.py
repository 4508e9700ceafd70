from sqlalchemy import Column, Numeric, String

from .base import BaseModel


class AppConfig(BaseModel):
    """Runtime pricing parameters keyed by name (e.g. ``card_fee_rate``)."""

    __tablename__ = "app_config"

    key = Column(String, primary_key=True)
    value_numeric = Column(Numeric(12, 4), nullable=True)
    value_text = Column(String, nullable=True)
