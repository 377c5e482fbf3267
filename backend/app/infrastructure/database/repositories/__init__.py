from .cra_repository import SQLAlchemyCRARepository
from .cra_predicates import build_cra_predicates

__all__ = [
    "SQLAlchemyCRARepository",
    "build_cra_predicates",
]
