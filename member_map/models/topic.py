from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from member_map.db.database import Base


class Topic(Base):
    __tablename__ = "topics"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    category_id = Column(Integer, nullable=False, index=True)
    title = Column(String, nullable=False)
    slug = Column(String, nullable=False)
    coordinates = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    user = relationship("User", back_populates="topics")

    def __init__(self, user_id, category_id, title, slug, coordinates=None, deleted_at=None):
        self.user_id = user_id
        self.category_id = category_id
        self.title = title
        self.slug = slug
        self.coordinates = coordinates
        self.deleted_at = deleted_at
