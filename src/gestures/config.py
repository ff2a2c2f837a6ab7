"""
Config loader for PalmOrbit.
Loads YAML configuration with dataclass validation.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple
import yaml


@dataclass
class CameraConfig:
    device_id: int = 0
    width: int = 640
    height: int = 480
    fps: int = 30


@dataclass
class MediaPipeConfig:
    model_path: Optional[str] = None   # Defaults to models/hand_landmarker.task
    max_num_hands: int = 2
    min_detection_confidence: float = 0.5
    min_presence_confidence: float = 0.5
    min_tracking_confidence: float = 0.5
    use_gpu: bool = True


@dataclass
class GestureConfig:
    # Thresholds are ratios of hand scale (wrist to middle MCP)
    pinch_ratio: float = 0.35
    fist_ratio: float = 1.4
    palm_ratio: float = 1.6
    min_finger_count: int = 3        # Fingertips needed for fist / open palm
    stability_frames: int = 4        # Debounce for discrete triggers
    invert_handedness: bool = True   # Labels assume a mirrored image; frames are not


@dataclass
class MotionConfig:
    rotation_noise_floor: float = 0.05   # Radians per tick
    rotation_gain: float = 0.12
    max_auto_rotation_speed: float = 0.007
    zoom_speed: float = 3.0
    zoom_gain: float = 1.5
    nav_cooldown_ms: float = 400.0


@dataclass
class TransformConfig:
    chaos_step: float = 0.05
    initial_scale: float = 1.0
    formed_scale_min: float = 0.6
    formed_scale_max: float = 2.0
    gallery_scale_min: float = 0.7
    gallery_scale_max: float = 1.4
    gallery_reset_scale: float = 1.0     # Applied on entry when above gallery max
    formed_position: Tuple[float, float, float] = (0.0, -0.5, 0.0)

    def __post_init__(self):
        # YAML gives lists
        self.formed_position = tuple(float(v) for v in self.formed_position)


@dataclass
class GalleryConfig:
    photo_dir: Optional[str] = None
    item_count: int = 6      # Used when no photos are discovered
    max_photos: int = 99


@dataclass
class UIConfig:
    debug_overlay: bool = False
    show_preview: bool = True
    tick_rate: int = 60


@dataclass
class Config:
    camera: CameraConfig = field(default_factory=CameraConfig)
    mediapipe: MediaPipeConfig = field(default_factory=MediaPipeConfig)
    gestures: GestureConfig = field(default_factory=GestureConfig)
    motion: MotionConfig = field(default_factory=MotionConfig)
    transform: TransformConfig = field(default_factory=TransformConfig)
    gallery: GalleryConfig = field(default_factory=GalleryConfig)
    ui: UIConfig = field(default_factory=UIConfig)


def _dict_to_dataclass(cls, data: dict):
    """Convert a dict to a dataclass, ignoring unknown keys."""
    if data is None:
        return cls()
    field_names = {f.name for f in cls.__dataclass_fields__.values()}
    filtered = {k: v for k, v in data.items() if k in field_names}
    return cls(**filtered)


def load_config(config_path: Optional[Path] = None) -> Config:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to config file. If None, uses default config.yaml
                    in project root.

    Returns:
        Config dataclass with all settings.
    """
    if config_path is None:
        # Default to config.yaml in project root
        config_path = Path(__file__).parent.parent.parent / "config.yaml"

    config_path = Path(config_path)

    if not config_path.exists():
        # Return defaults if no config file
        return Config()

    with open(config_path, 'r') as f:
        data = yaml.safe_load(f) or {}

    return Config(
        camera=_dict_to_dataclass(CameraConfig, data.get('camera')),
        mediapipe=_dict_to_dataclass(MediaPipeConfig, data.get('mediapipe')),
        gestures=_dict_to_dataclass(GestureConfig, data.get('gestures')),
        motion=_dict_to_dataclass(MotionConfig, data.get('motion')),
        transform=_dict_to_dataclass(TransformConfig, data.get('transform')),
        gallery=_dict_to_dataclass(GalleryConfig, data.get('gallery')),
        ui=_dict_to_dataclass(UIConfig, data.get('ui')),
    )
