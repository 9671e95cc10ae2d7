from .lab import router as lab_router

__all__ = ["lab_router"]
