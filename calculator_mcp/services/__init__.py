"""
Business logic services.
"""
from .assets import AssetStore
from .calculator import Operation, compute

__all__ = ['AssetStore', 'Operation', 'compute']
