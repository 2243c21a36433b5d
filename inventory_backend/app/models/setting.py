"""
Business settings key/value model.
"""

from sqlalchemy import Column, String, Text
from inventory_backend.app.db.session import Base


class Setting(Base):
    __tablename__ = "settings"

    key = Column(String(100), primary_key=True)
    value = Column(Text, nullable=True)

    def __repr__(self):
        return f"<Setting(key='{self.key}')>"
