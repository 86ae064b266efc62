"""
Reversible timeline edits.

Each command is a frozen record holding only the literal data needed to
compute both directions. apply() and revert() take the current scene list
and return a fresh, recalculated list; neither mutates its input.
"""
import random
from dataclasses import dataclass, replace
import constants
from model import SceneModel, recalculate_scenes
@dataclass(frozen=True)

class AddSceneCommand:
    scene: SceneModel

    @property
    def description(self):
        return f"Add {self.scene.name}"

    def apply(self, scenes):
        return recalculate_scenes(list(scenes) + [self.scene])

    def revert(self, scenes):
        return recalculate_scenes(list(scenes)[:-1])
@dataclass(frozen=True)

class ReorderScenesCommand:
    from_index: int
    to_index: int
    scene_name: str = ""

    @property
    def description(self):
        return f"Move {self.scene_name} to position {self.to_index + 1}"

    def apply(self, scenes):
        return _move(scenes, self.from_index, self.to_index)

    def revert(self, scenes):
        return _move(scenes, self.to_index, self.from_index)
@dataclass(frozen=True)

class ResizeSceneCommand:
    index: int
    old_length: int
    new_length: int
    scene_name: str = ""
    min_length: int = constants.MIN_SCENE_LENGTH

    def __post_init__(self):
        if self.new_length < self.min_length:
            raise ValueError(
                f"Scene length {self.new_length} is below the minimum of {self.min_length} frames")

    @property
    def description(self):
        return f"Resize {self.scene_name} from {self.old_length} to {self.new_length} frames"

    def apply(self, scenes):
        return _set_length(scenes, self.index, self.new_length)

    def revert(self, scenes):
        return _set_length(scenes, self.index, self.old_length)

def _move(scenes, src, dst):
    updated = list(scenes)
    moved = updated.pop(src)
    updated.insert(dst, moved)
    return recalculate_scenes(updated)

def _set_length(scenes, index, length):
    updated = list(scenes)
    updated[index] = replace(updated[index], length=length)
    return recalculate_scenes(updated)

def _check_index(scenes, index, label):
    if not 0 <= index < len(scenes):
        raise IndexError(f"{label} {index} out of range for {len(scenes)} scenes")

def build_add_scene(scenes, length=constants.DEFAULT_SCENE_LENGTH, rng=None):
    """Captures the new scene once, so redo never regenerates name or color."""
    rng = rng or random
    position = len(scenes)
    scene = SceneModel(
        name=f"Scene {position + 1}",
        color=rng.choice(constants.SCENE_PALETTE),
        length=length,
        index=position,
        start_frame=sum(s.length for s in scenes),
    )
    return AddSceneCommand(scene)

def build_reorder_scenes(scenes, from_index, to_index):
    _check_index(scenes, from_index, "from_index")
    _check_index(scenes, to_index, "to_index")
    return ReorderScenesCommand(from_index, to_index, scenes[from_index].name)

def build_resize_scene(scenes, index, new_length, min_length=constants.MIN_SCENE_LENGTH):
    _check_index(scenes, index, "scene index")
    scene = scenes[index]
    return ResizeSceneCommand(index, scene.length, new_length, scene.name, min_length)
