from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from member_map.db.database import Base
from member_map.models.topic import Topic  # noqa: F401 - register mapper for the relationship


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, index=True)
    name = Column(String, nullable=True)
    avatar_template = Column(String, nullable=True)
    hashed_password = Column(String, nullable=False)
    # Whitespace-separated location fragments, see services.geo_parser
    geoinformation = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    topics = relationship("Topic", back_populates="user", cascade="all, delete-orphan")

    def __init__(self, username, hashed_password, name=None, avatar_template=None, geoinformation=None):
        self.username = username
        self.hashed_password = hashed_password
        self.name = name
        self.avatar_template = avatar_template
        self.geoinformation = geoinformation
