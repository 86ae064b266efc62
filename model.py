from dataclasses import dataclass, fields, asdict, replace
from typing import NamedTuple, Optional
import constants
@dataclass(frozen=True)

class SceneModel:
    name: str
    color: str
    length: int = constants.DEFAULT_SCENE_LENGTH
    index: int = 0
    start_frame: int = 0

    @property
    def end_frame(self):
        """First frame after this scene."""
        return self.start_frame + self.length

    def contains(self, frame):
        return self.start_frame <= frame < self.end_frame
    @classmethod

    def from_dict(cls, data):
        if 'scene_name' in data and 'name' not in data:
            data = {
                'name': data['scene_name'],
                'color': data.get('scene_color', constants.SCENE_PALETTE[0]),
                'length': data.get('scene_length', constants.DEFAULT_SCENE_LENGTH),
                'index': data.get('scene_index', 0),
                'start_frame': data.get('start_frame', 0),
            }
        valid_keys = {f.name for f in fields(cls)}
        filtered_args = {k: v for k, v in data.items() if k in valid_keys}
        required_defaults = {'name': "Untitled", 'color': constants.SCENE_PALETTE[0]}
        for key, default in required_defaults.items():
            if key not in filtered_args:
                filtered_args[key] = default
        return cls(**filtered_args)

    def to_dict(self):
        return asdict(self)
@dataclass(frozen=True)

class PlaybackState:
    is_playing: bool = False
    current_frame: int = 0
    fps: float = constants.DEFAULT_FPS

class FrameLocation(NamedTuple):
    scene: SceneModel
    local_frame: int

def recalculate_scenes(scenes):
    """Re-derives index and start_frame for every scene from list order.

    Returns a new list; lengths are taken as they are.
    """
    result = []
    cursor = 0
    for i, scene in enumerate(scenes):
        if scene.index != i or scene.start_frame != cursor:
            scene = replace(scene, index=i, start_frame=cursor)
        result.append(scene)
        cursor += scene.length
    return result

def total_frames(scenes):
    return sum(s.length for s in scenes)

def scene_at_frame(scenes, frame) -> Optional[FrameLocation]:
    if frame < 0:
        return None
    for scene in scenes:
        if scene.contains(frame):
            return FrameLocation(scene, frame - scene.start_frame)
    return None

def find_scene_by_name(scenes, name):
    for scene in scenes:
        if scene.name == name:
            return scene
    return None

def clamp_frame(frame, total):
    return max(0, min(frame, total - 1))
