from typing import Annotated, Any, Dict, Optional, Union

from pydantic import BaseModel, Field, StrictBool, StrictInt, StrictStr

from achievement_api.enums import RewardType

# plain string (default language) or {"en": "...", "ru": "...", ...}
TranslationIn = Union[StrictStr, Dict[str, Any]]
Target = Annotated[StrictInt, Field(ge=0)]


################
### Category ###
################
class CategoryCreate(BaseModel):
    key: StrictStr
    name: TranslationIn

class CategoryUpdate(BaseModel):
    key: Optional[StrictStr] = None
    name: Optional[TranslationIn] = None


###################
### Achievement ###
###################
class AchievementCreate(BaseModel):
    title: TranslationIn
    description: TranslationIn
    icon: Optional[StrictStr] = None
    hidden: StrictBool = False
    target: Optional[Target] = None
    categoryId: StrictStr

class AchievementUpdate(BaseModel):
    title: Optional[TranslationIn] = None
    description: Optional[TranslationIn] = None
    icon: Optional[StrictStr] = None
    hidden: Optional[StrictBool] = None
    target: Optional[Target] = None
    categoryId: Optional[StrictStr] = None


##############
### Reward ###
##############
class RewardCreate(BaseModel):
    type: RewardType
    title: TranslationIn
    description: TranslationIn
    icon: Optional[StrictStr] = None
    isApplicable: StrictBool = False
    details: Optional[Dict[str, Any]] = None
    achievementId: StrictStr

class RewardUpdate(BaseModel):
    type: Optional[RewardType] = None
    title: Optional[TranslationIn] = None
    description: Optional[TranslationIn] = None
    icon: Optional[StrictStr] = None
    isApplicable: Optional[StrictBool] = None
    details: Optional[Dict[str, Any]] = None
    achievementId: Optional[StrictStr] = None
