from sqlalchemy import Column, String, Text, DateTime, func
from database import Base


class BookmarkSet(Base):
    """One named bookmark set, stored as a single serialized document.

    The whole set is overwritten on every mutation, so there is exactly one
    row per device scope and no per-verse rows.
    """
    __tablename__ = 'bookmark_sets'

    key = Column(String(200), primary_key=True)  # e.g. "saints-app-bookmarks:<device id>"
    payload = Column(Text, nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f'<BookmarkSet {self.key} ({len(self.payload or "")} bytes)>'
