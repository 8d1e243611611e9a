"""Downstream reports built on the clean tables."""

from .channel_roi import channel_performance, recommend_actions

__all__ = [
    "channel_performance",
    "recommend_actions",
]
