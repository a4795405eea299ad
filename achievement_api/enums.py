from enum import Enum as PyEnum


class ProgressStatus(str, PyEnum):
    INPROGRESS = "INPROGRESS"
    BLOCKED = "BLOCKED"
    FINISHED = "FINISHED"


class RewardType(str, PyEnum):
    badge = "badge"
    bonus_crypto = "bonus_crypto"
    discount_commission = "discount_commission"
    cat_accessories = "cat_accessories"
    visual_effects = "visual_effects"
