"""Runway Explorer Web UI Components"""

from .image_preview import ImagePreview
from .ui_components import show_video_preview, show_status, show_breadcrumbs, show_thumbnail_trail
from .state_manager import StateManager
from .upload_ui import UploadUI
from .explore_ui import ExploreUI
from .app_ui import ExplorerApp
