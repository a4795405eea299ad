from pydantic import BaseModel
from datetime import datetime

class ProgressStatsOut(BaseModel):
    completed: int
    inProgress: int
    blocked: int

class AchievementStatsOut(BaseModel):
    hidden: int
    visible: int

class RewardStatsOut(BaseModel):
    applicable: int
    total: int

class StatsOut(BaseModel):
    categories: int
    achievements: int
    rewards: int
    progress: int
    progressStats: ProgressStatsOut
    achievementStats: AchievementStatsOut
    rewardStats: RewardStatsOut

class HealthOut(BaseModel):
    status: str
    timestamp: datetime

class DatabaseHealthOut(BaseModel):
    status: str
    database: str
