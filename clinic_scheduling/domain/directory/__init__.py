"""Directory Domain - patient and doctor registration used by the scheduler"""

from .router import router

__all__ = ["router"]
