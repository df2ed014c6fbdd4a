"""Application layer – capture pipeline and inbox services."""
from cellex_inbox.application.pipeline import CapturePipeline

__all__ = ["CapturePipeline"]
