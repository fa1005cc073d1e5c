"""
Ad Canvas Editor - Data Models

This module contains the data model classes for the ad creative.

Public API: import Scene and the layer types from models.scene.
The models/scene/_internal/ subdirectory contains implementation only.
"""

from .scene import Scene, Layer, SizeConfig, Animation, AdSize

__all__ = ['Scene', 'Layer', 'SizeConfig', 'Animation', 'AdSize']
