"""Services layer - Application orchestration.

Available services:
- NavigatorService: Loads a road network, routes between coordinates
  and renders the annotated result
"""

from .navigator import NavigatorService

__all__ = ["NavigatorService"]
