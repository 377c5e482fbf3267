from .base import Base
from .session import Database
from .models import ActivityModel, CRAModel

__all__ = [
    "Base",
    "Database",
    "ActivityModel",
    "CRAModel",
]
