from .base import Element, MutationRecord, Subscription, Surface, TaskMenuItem

__all__ = ["Element", "MutationRecord", "Subscription", "Surface", "TaskMenuItem"]
