from .cra import ActivityModel, CRAModel

__all__ = [
    "ActivityModel",
    "CRAModel",
]
