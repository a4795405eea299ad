from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, UniqueConstraint, Enum as SAEnum
from sqlalchemy.orm import relationship
from achievement_api.database.base_class import Base
from achievement_api.enums import ProgressStatus
from achievement_api.input_util import generate_cuid
from datetime import datetime

class UserAchievementProgress(Base):
    __tablename__ = "user_achievement_progress"

    id = Column(String(25), primary_key=True, index=True, default=generate_cuid)
    user_id = Column(String(255), nullable=False, index=True)    # external user, not managed here
    achievement_id = Column(String(25), ForeignKey("achievements.id", ondelete="CASCADE"), nullable=False)
    status = Column(
        SAEnum(
            ProgressStatus,
            name="progress_status",
            validate_strings=True,
        ),
        default=ProgressStatus.INPROGRESS,
        nullable=False,
    )
    current_step = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=datetime.now, nullable=False)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now, nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "achievement_id", name="uq_progress_user_achievement"),
    )

    achievement = relationship("Achievement", back_populates="progress")
