from typing import Annotated, Optional

from pydantic import AliasChoices, BaseModel, Field, StrictInt, StrictStr

from achievement_api.enums import ProgressStatus

NonEmptyStr = Annotated[StrictStr, Field(min_length=1)]
Step = Annotated[StrictInt, Field(ge=0)]

# "progress" is the key older clients send the status under
_STATUS_ALIASES = AliasChoices("status", "progress")


class ProgressCreate(BaseModel):
    userId: NonEmptyStr
    achievementId: NonEmptyStr
    status: Optional[ProgressStatus] = Field(None, validation_alias=_STATUS_ALIASES)
    currentStep: Optional[Step] = None


class ProgressUpdate(BaseModel):
    userId: Optional[NonEmptyStr] = None
    achievementId: Optional[NonEmptyStr] = None
    status: Optional[ProgressStatus] = Field(None, validation_alias=_STATUS_ALIASES)
    currentStep: Optional[Step] = None
