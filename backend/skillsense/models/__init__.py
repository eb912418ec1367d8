from .profile import SkillProfile
from .skill import Skill, DiscoveredSkill, SkillType, SkillState
from .quest import Quest
from .gap import TargetRole, SkillGap

__all__ = [
    "SkillProfile",
    # Skill models
    "Skill", "DiscoveredSkill", "SkillType", "SkillState",
    "Quest",
    # Gap analysis
    "TargetRole", "SkillGap",
]
