from .profiles import router as profiles_router
from .extraction import router as extraction_router
from .skills import router as skills_router
from .analysis import router as analysis_router
from .quests import router as quests_router

__all__ = [
    "profiles_router", "extraction_router", "skills_router",
    "analysis_router", "quests_router"
]
