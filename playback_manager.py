import logging
from PyQt5.QtCore import QObject, QTimer, pyqtSignal
import constants

def format_time(frames, fps=constants.DEFAULT_FPS):
    seconds = int(frames // fps)
    minutes = seconds // 60
    return f"{minutes}:{seconds % 60:02d}"

class Renderer:
    """What the playback manager pushes frames into. Subclass or duck-type."""

    def render_scene(self, scene_name, scene_color, local_frame):
        raise NotImplementedError

    def clear(self):
        raise NotImplementedError

class PlaybackManager(QObject):
    frame_changed = pyqtSignal(int)
    state_changed = pyqtSignal(bool)

    def __init__(self, engine, renderer=None, parent=None):
        super().__init__(parent)
        self.engine = engine
        self.renderer = renderer
        self.logger = logging.getLogger(constants.LOGGER_NAME)
        self.timer = QTimer(self)
        self.timer.setInterval(self._interval_ms())
        self.timer.timeout.connect(self._tick)
        self._last_frame = engine.playback.current_frame
        self._last_playing = engine.playback.is_playing
        self._last_render = None
        engine.subscribe(self._on_engine_changed)
        if self._last_playing:
            self.timer.start()
        self.render_current()

    def _interval_ms(self):
        return max(1, int(round(1000 / self.engine.playback.fps)))

    def set_renderer(self, renderer):
        self.renderer = renderer
        self._last_render = None
        self.render_current()

    def toggle_play(self):
        self.engine.set_playback_state(not self.engine.playback.is_playing)

    def play(self):
        self.engine.set_playback_state(True)

    def pause(self):
        self.engine.set_playback_state(False)

    def seek(self, frame):
        return self.engine.set_current_frame(frame)

    def detach(self):
        self.timer.stop()
        self.engine.unsubscribe(self._on_engine_changed)

    def _tick(self):
        if not self.engine.playback.is_playing:
            self.timer.stop()
            return
        self.engine.advance_frame()

    def _on_engine_changed(self, engine):
        playback = engine.playback
        if playback.is_playing != self._last_playing:
            self._last_playing = playback.is_playing
            if playback.is_playing:
                self.timer.setInterval(self._interval_ms())
                self.timer.start()
            else:
                self.timer.stop()
            self.logger.debug(f"[PLAYBACK] {'Started' if playback.is_playing else 'Stopped'} at frame {playback.current_frame}")
            self.state_changed.emit(playback.is_playing)
        if playback.current_frame != self._last_frame:
            self._last_frame = playback.current_frame
            self.frame_changed.emit(playback.current_frame)
        self.render_current()

    def render_current(self):
        if self.renderer is None:
            return
        location = self.engine.current_location()
        if location is None:
            key = None
        else:
            key = (location.scene.name, location.scene.color, location.local_frame)
        if key == self._last_render and self._last_render is not None:
            return
        try:
            if key is None:
                self.renderer.clear()
            else:
                self.renderer.render_scene(*key)
            self._last_render = key
        except Exception as e:
            self.logger.error(f"[PLAYBACK] Renderer failed, detaching it: {e}", exc_info=True)
            self.renderer = None
            self._last_render = None
            self.timer.stop()
            self.engine.set_playback_state(False)
