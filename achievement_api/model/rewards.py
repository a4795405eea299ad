from sqlalchemy import Column, String, Boolean, DateTime, JSON, ForeignKey, Enum as SAEnum
from sqlalchemy.orm import relationship
from achievement_api.database.base_class import Base
from achievement_api.enums import RewardType
from achievement_api.input_util import generate_cuid
from datetime import datetime


class Reward(Base):
    __tablename__ = "rewards"

    id = Column(String(25), primary_key=True, index=True, default=generate_cuid)
    type = Column(
        SAEnum(
            RewardType,
            name="reward_type",
            validate_strings=True,
        ),
        nullable=False,
    )
    title = Column(JSON, nullable=False)
    description = Column(JSON, nullable=False)
    icon = Column(String(512), nullable=True)
    is_applicable = Column(Boolean, default=False, nullable=False)
    details = Column(JSON, default=dict, nullable=False)    # e.g. {"amount": 100, "currency": "USDT"}

    # one reward per achievement
    achievement_id = Column(String(25), ForeignKey("achievements.id", ondelete="CASCADE"), nullable=False, unique=True)
    created_at = Column(DateTime, default=datetime.now, nullable=False)

    achievement = relationship("Achievement", back_populates="reward")
