"""
Favorite icons. Works on SQLite (default) and PostgreSQL.
A favorite only remembers (provider, name) plus the color/size it was starred with;
the icon itself always comes from the live provider.
"""
from sqlalchemy import Column, DateTime, Integer, String, UniqueConstraint

from .database import Base


class FavoriteIcon(Base):
    __tablename__ = "favorite_icons"
    __table_args__ = (
        UniqueConstraint("provider", "name", name="uq_favorite_provider_name"),
    )

    id = Column(Integer, primary_key=True, index=True)
    provider = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    color = Column(String, nullable=True)
    size = Column(Integer, nullable=True)
    created_at = Column(DateTime, nullable=False)

    def to_dict(self) -> dict:
        return {
            "provider": self.provider,
            "name": self.name,
            "color": self.color,
            "size": self.size,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
