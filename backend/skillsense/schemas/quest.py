from typing import List, Optional
from pydantic import BaseModel
from datetime import datetime


class QuestResponse(BaseModel):
    id: int
    skill_id: int
    quest_type: str
    quest_description: str
    is_completed: bool
    completed_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class QuestBoard(BaseModel):
    quests: List[QuestResponse]
    completed: int
    total: int


class QuestCompletion(BaseModel):
    quest: QuestResponse
    skill_unlocked: bool
