from .visibility import recompute_visibility

__all__ = ["recompute_visibility"]
