from sqlalchemy import Column, String, Integer, Boolean, JSON, DateTime, ForeignKey
from achievement_api.database.base_class import Base
from achievement_api.input_util import generate_cuid
from sqlalchemy.orm import relationship
from datetime import datetime

class Achievement(Base):
    __tablename__ = "achievements"

    id = Column(String(25), primary_key=True, index=True, default=generate_cuid)

    title = Column(JSON, nullable=False)          # translations map
    description = Column(JSON, nullable=False)    # translations map

    icon = Column(String(512), nullable=True)     # URL or emoji
    hidden = Column(Boolean, default=False, nullable=False)
    target = Column(Integer, default=0, nullable=True)    # 0 / NULL: no step counting

    category_id = Column(String(25), ForeignKey("achievement_categories.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime, default=datetime.now, nullable=False)

    category = relationship("AchievementCategory", back_populates="achievements")
    reward = relationship("Reward", back_populates="achievement", uselist=False, cascade="all, delete-orphan")
    progress = relationship("UserAchievementProgress", back_populates="achievement", cascade="all, delete-orphan")
