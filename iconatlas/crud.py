from __future__ import annotations

from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .models import FavoriteIcon


# --------------------------------------------------
# Favorites
# --------------------------------------------------

def get_favorite(db: Session, provider: str, name: str) -> FavoriteIcon | None:
    return (
        db.query(FavoriteIcon)
        .filter(FavoriteIcon.provider == provider, FavoriteIcon.name == name)
        .first()
    )


def is_favorite(db: Session, provider: str, name: str) -> bool:
    return get_favorite(db, provider, name) is not None


def add_favorite(db: Session, provider: str, name: str, color: str | None = None, size: int | None = None) -> tuple[FavoriteIcon, bool]:
    """
    Star an icon. Returns (favorite, created).
    Starring twice keeps the first row and updates its color/size.
    """
    existing = get_favorite(db, provider, name)
    if existing is not None:
        existing.color = color or existing.color
        existing.size = size or existing.size
        db.commit()
        return existing, False

    fav = FavoriteIcon(provider=provider, name=name, color=color, size=size, created_at=datetime.now())
    db.add(fav)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent insert of the same pair.
        db.rollback()
        return get_favorite(db, provider, name), False
    db.refresh(fav)
    return fav, True


def remove_favorite(db: Session, provider: str, name: str) -> bool:
    fav = get_favorite(db, provider, name)
    if fav is None:
        return False
    db.delete(fav)
    db.commit()
    return True


def list_favorites(db: Session, provider: str | None = None) -> list[FavoriteIcon]:
    """Newest first; optionally limited to one provider."""
    q = db.query(FavoriteIcon)
    if provider:
        q = q.filter(FavoriteIcon.provider == provider)
    return q.order_by(FavoriteIcon.created_at.desc(), FavoriteIcon.id.desc()).all()
