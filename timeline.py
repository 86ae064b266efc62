import logging
import random
from dataclasses import replace
import constants
import commands
from history import UndoStack
from model import (SceneModel, PlaybackState, recalculate_scenes, total_frames,
                   scene_at_frame, find_scene_by_name, clamp_frame)
from system import EngineSettings

class TimelineEngine:
    """Authoritative scene sequence, playhead and edit history.

    Structural edits only happen through the undo stack. After every
    committed transition the playhead is re-anchored to the scene it was in
    and playback is paused.
    """

    def __init__(self, scenes=None, settings=None, rng=None):
        self.settings = settings or EngineSettings()
        self.logger = logging.getLogger(constants.LOGGER_NAME)
        self.rng = rng or random.Random()
        if scenes is None:
            scenes = constants.DEFAULT_SCENES
        models = [s if isinstance(s, SceneModel) else SceneModel.from_dict(s) for s in scenes]
        for s in models:
            if s.length < self.settings.min_scene_length:
                raise ValueError(f"{s.name} is {s.length} frames, minimum is {self.settings.min_scene_length}")
        self._scenes = recalculate_scenes(models)
        self._total_frames = total_frames(self._scenes)
        self._playback = PlaybackState(fps=self.settings.fps)
        self.history = UndoStack(max_depth=self.settings.history_depth or None)
        self._listeners = []
        self.logger.info(f"[TIMELINE] Initialized with {len(self._scenes)} scenes, {self._total_frames} frames at {self.settings.fps} fps")

    @property
    def scenes(self):
        return tuple(self._scenes)

    @property
    def total_frames(self):
        return self._total_frames

    @property
    def playback(self):
        return self._playback

    @property
    def command_history(self):
        return tuple(self.history.commands)

    @property
    def command_index(self):
        return self.history.command_index

    @property
    def can_undo(self):
        return self.history.can_undo

    @property
    def can_redo(self):
        return self.history.can_redo

    def scene_at_frame(self, frame):
        return scene_at_frame(self._scenes, frame)

    def current_location(self):
        return self.scene_at_frame(self._playback.current_frame)

    def add_scene(self):
        cmd = commands.build_add_scene(self._scenes, self.settings.default_scene_length, self.rng)
        self._execute(cmd)
        return cmd

    def reorder_scenes(self, from_index, to_index):
        cmd = commands.build_reorder_scenes(self._scenes, from_index, to_index)
        self._execute(cmd)
        return cmd

    def resize_scene(self, scene_index, new_length):
        """Resizes a scene; lengths below the configured minimum are raised to it."""
        min_length = self.settings.min_scene_length
        if new_length < min_length:
            self.logger.debug(f"[TIMELINE] Clamping resize of scene {scene_index} from {new_length} to {min_length}")
            new_length = min_length
        cmd = commands.build_resize_scene(self._scenes, scene_index, new_length, min_length)
        self._execute(cmd)
        return cmd

    def undo(self):
        return self._commit(self.history.undo)

    def redo(self):
        return self._commit(self.history.redo)

    def set_current_frame(self, frame):
        frame = clamp_frame(int(frame), self._total_frames)
        if frame != self._playback.current_frame:
            self._playback = replace(self._playback, current_frame=frame)
            self._notify()
        return frame

    def set_playback_state(self, is_playing):
        is_playing = bool(is_playing)
        if is_playing != self._playback.is_playing:
            self._playback = replace(self._playback, is_playing=is_playing)
            self.logger.debug(f"[PLAYBACK] {'Playing' if is_playing else 'Paused'} at frame {self._playback.current_frame}")
            self._notify()

    def advance_frame(self):
        """Steps the playhead one frame forward, wrapping to 0 past the end."""
        if self._total_frames <= 0:
            self.set_playback_state(False)
            return 0
        next_frame = self._playback.current_frame + 1
        if next_frame >= self._total_frames:
            next_frame = 0
        return self.set_current_frame(next_frame)

    def recalculate_timeline(self):
        self._scenes = recalculate_scenes(self._scenes)
        self._total_frames = total_frames(self._scenes)
        self._notify()

    def subscribe(self, callback):
        self._listeners.append(callback)
        return callback

    def unsubscribe(self, callback):
        if callback in self._listeners:
            self._listeners.remove(callback)

    def snapshot(self):
        return {
            'scenes': [s.to_dict() for s in self._scenes],
            'total_frames': self._total_frames,
            'playback': {
                'is_playing': self._playback.is_playing,
                'current_frame': self._playback.current_frame,
                'fps': self._playback.fps,
            },
            'command_index': self.history.command_index,
            'history': [c.description for c in self.history.commands],
        }

    def _execute(self, cmd):
        self._commit(lambda scenes: self.history.execute(cmd, scenes))

    def _commit(self, transition):
        anchor = self.current_location()
        new_scenes = transition(self._scenes)
        if new_scenes is None:
            return False
        self._scenes = new_scenes
        self._total_frames = total_frames(new_scenes)
        self._reconcile(anchor)
        self._notify()
        return True

    def _reconcile(self, anchor):
        old_frame = self._playback.current_frame
        self.logger.debug(f"[TIMELINE] Reconciling playhead: frame {old_frame}, {self._total_frames} frames, {len(self._scenes)} scenes")
        new_frame = None
        if anchor is not None:
            scene = find_scene_by_name(self._scenes, anchor.scene.name)
            if scene is not None:
                new_frame = scene.start_frame + min(anchor.local_frame, scene.length - 1)
                self.logger.debug(f"[TIMELINE] {scene.name} now starts at {scene.start_frame}, local frame {anchor.local_frame} -> {new_frame}")
            else:
                self.logger.debug(f"[TIMELINE] {anchor.scene.name} no longer exists, clamping")
        if new_frame is None:
            new_frame = clamp_frame(old_frame, self._total_frames)
        self._playback = replace(self._playback, is_playing=False, current_frame=new_frame)
        self.logger.debug(f"[TIMELINE] Playhead {old_frame} -> {new_frame}, playback paused")

    def _notify(self):
        for callback in list(self._listeners):
            callback(self)
