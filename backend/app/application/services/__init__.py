from .cra_service import CRAService

__all__ = [
    "CRAService",
]
