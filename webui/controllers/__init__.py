"""
Controllers for the Runway explorer.
Handles business logic coordination without touching UI state.
"""

from .app_controller import AppController
from .cache_controller import CacheController
from .generation_controller import GenerationController
from .exploration_controller import ExplorationController

__all__ = ['AppController', 'CacheController', 'GenerationController', 'ExplorationController']
