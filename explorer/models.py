"""
Data models for the Runway explorer.
Pure data structures with no business logic.
"""

import uuid
from typing import Optional, List
from dataclasses import dataclass, field

from explorer.image_encoding import file_to_data_uri


# Fixed generation parameters shared by every task
DEFAULT_MODEL = "gen4_turbo"
DEFAULT_RATIO = "1280:720"
DEFAULT_DURATION = 10

SETTING_PROMPT = (
    "Slow cinematic pan across this scene, smooth camera movement, "
    "atmospheric lighting, high quality"
)
PERSON_PROMPT = (
    "Person talking naturally and expressively, subtle head movements, "
    "natural facial expressions, cinematic lighting"
)


@dataclass(frozen=True)
class GenerationRequest:
    """A single image-to-video submission."""
    image: str  # data URI
    prompt: str
    ratio: str = DEFAULT_RATIO
    duration: int = DEFAULT_DURATION
    model: str = DEFAULT_MODEL


@dataclass(frozen=True)
class GenerationResult:
    """Result of the two-video generation."""
    setting_video_url: Optional[str]
    person_video_url: Optional[str]

    def to_dict(self) -> dict:
        return {
            "settingVideoUrl": self.setting_video_url,
            "personVideoUrl": self.person_video_url,
        }


@dataclass(frozen=True)
class ExplorationResult:
    """Result of a single exploration generation."""
    video_url: Optional[str]

    def to_dict(self) -> dict:
        return {"videoUrl": self.video_url}


@dataclass(frozen=True)
class ExplorationNode:
    """One step of an exploration: the frame it started from and the video it produced."""
    prompt: str
    source_frame_image: str  # data URI
    video_url: Optional[str]
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "prompt": self.prompt,
            "sourceFrameImage": self.source_frame_image,
            "videoUrl": self.video_url,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ExplorationNode":
        return cls(
            id=data["id"],
            prompt=data["prompt"],
            source_frame_image=data["sourceFrameImage"],
            video_url=data.get("videoUrl"),
        )


@dataclass
class ImageSlot:
    """An upload slot in the intake form."""
    label: str
    key: str
    raw_image: Optional[bytes] = None
    preview_uri: Optional[str] = None
    mime_type: Optional[str] = None
    required: bool = False

    @property
    def is_filled(self) -> bool:
        return self.raw_image is not None

    def fill(self, data: bytes, filename: Optional[str] = None) -> None:
        """Store an uploaded file and its inline preview."""
        self.raw_image = data
        self.preview_uri = file_to_data_uri(data, filename)
        self.mime_type = self.preview_uri[len("data:"):].split(";", 1)[0]

    def clear(self) -> None:
        self.raw_image = None
        self.preview_uri = None
        self.mime_type = None


def default_image_slots() -> List[ImageSlot]:
    """The five intake slots: four person photos and one background."""
    return [
        ImageSlot("Front", "front", required=True),
        ImageSlot("Left", "left"),
        ImageSlot("Right", "right"),
        ImageSlot("Back", "back"),
        ImageSlot("Background / Setting", "background", required=True),
    ]
