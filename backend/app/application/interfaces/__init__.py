from .cra_repository import CRARepository

__all__ = [
    "CRARepository",
]
