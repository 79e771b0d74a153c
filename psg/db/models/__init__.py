# SQLAlchemy models
from .base import Base
from .styles import LearnerScoreRecord, ModuleStyleRecord

__all__ = [
    "Base",
    "LearnerScoreRecord",
    "ModuleStyleRecord",
]
