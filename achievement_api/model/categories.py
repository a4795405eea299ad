from sqlalchemy import Column, String, JSON, DateTime
from sqlalchemy.orm import relationship
from achievement_api.database.base_class import Base
from achievement_api.input_util import generate_cuid
from datetime import datetime


class AchievementCategory(Base):
    __tablename__ = "achievement_categories"

    id = Column(String(25), primary_key=True, index=True, default=generate_cuid)
    key = Column(String(50), nullable=False, unique=True)
    name = Column(JSON, nullable=False)    # {"en": "...", "ru": "...", ...}
    created_at = Column(DateTime, default=datetime.now, nullable=False)

    achievements = relationship("Achievement", back_populates="category", cascade="all, delete-orphan")
