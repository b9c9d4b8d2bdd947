from .report_router import router as report_router

__all__ = [
    "report_router",
]
