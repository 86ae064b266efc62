import pytest
from PyQt5.QtCore import QCoreApplication
from playback_manager import PlaybackManager, Renderer, format_time
from timeline import TimelineEngine

# Ensure a Qt application exists (singleton)
if not QCoreApplication.instance():
    app = QCoreApplication([])

class RecordingRenderer(Renderer):

    def __init__(self):
        self.calls = []

    def render_scene(self, scene_name, scene_color, local_frame):
        self.calls.append((scene_name, scene_color, local_frame))

    def clear(self):
        self.calls.append(None)

class ExplodingRenderer(Renderer):

    def render_scene(self, scene_name, scene_color, local_frame):
        raise RuntimeError("renderer lost")

    def clear(self):
        raise RuntimeError("renderer lost")

@pytest.fixture
def engine():
    return TimelineEngine()

@pytest.fixture
def renderer():
    return RecordingRenderer()

@pytest.fixture
def manager(engine, renderer):
    mgr = PlaybackManager(engine, renderer)
    yield mgr
    mgr.detach()

@pytest.mark.parametrize("frames, fps, expected", [
    (0, 30, "0:00"),
    (120, 30, "0:04"),
    (1830, 30, "1:01"),
    (59, 30, "0:01"),
    (48, 24, "0:02"),
])
def test_format_time(frames, fps, expected):
    assert format_time(frames, fps) == expected

class TestRendering:

    def test_renders_on_attach(self, manager, renderer):
        assert renderer.calls == [("Scene 1", "#F65937", 0)]

    def test_renders_after_seek(self, manager, renderer, engine):
        manager.seek(95)
        assert renderer.calls[-1] == ("Scene 3", "#1FBD5F", 5)

    def test_duplicate_frames_not_rerendered(self, manager, renderer, engine):
        engine.set_playback_state(True)
        engine.set_playback_state(False)
        assert renderer.calls == [("Scene 1", "#F65937", 0)]

    def test_empty_timeline_clears(self, renderer):
        mgr = PlaybackManager(TimelineEngine(scenes=[]), renderer)
        assert renderer.calls == [None]
        mgr.detach()

    def test_late_renderer(self, engine, renderer):
        mgr = PlaybackManager(engine)
        engine.set_current_frame(31)
        mgr.set_renderer(renderer)
        assert renderer.calls == [("Scene 2", "#379EF6", 1)]
        mgr.detach()

    def test_renderer_failure_pauses_and_detaches(self, engine):
        mgr = PlaybackManager(engine)
        engine.set_playback_state(True)
        mgr.set_renderer(ExplodingRenderer())
        assert mgr.renderer is None
        assert engine.playback.is_playing is False
        assert not mgr.timer.isActive()
        engine.add_scene()
        assert engine.total_frames == 150
        mgr.detach()

class TestTransport:

    def test_play_starts_timer(self, manager, engine):
        states = []
        manager.state_changed.connect(states.append)
        manager.play()
        assert manager.timer.isActive()
        assert manager.timer.interval() == 33
        assert states == [True]
        manager.pause()
        assert not manager.timer.isActive()
        assert states == [True, False]

    def test_toggle(self, manager, engine):
        manager.toggle_play()
        assert engine.playback.is_playing is True
        manager.toggle_play()
        assert engine.playback.is_playing is False

    def test_tick_advances_and_renders(self, manager, renderer, engine):
        frames = []
        manager.frame_changed.connect(frames.append)
        manager.play()
        manager._tick()
        manager._tick()
        assert engine.playback.current_frame == 2
        assert frames == [1, 2]
        assert renderer.calls[-1] == ("Scene 1", "#F65937", 2)

    def test_tick_wraps(self, manager, engine):
        engine.set_current_frame(119)
        manager.play()
        manager._tick()
        assert engine.playback.current_frame == 0

    def test_tick_while_paused_stops_timer(self, manager, engine):
        manager.timer.start()
        manager._tick()
        assert not manager.timer.isActive()
        assert engine.playback.current_frame == 0

    def test_edit_stops_playback(self, manager, engine):
        states = []
        manager.state_changed.connect(states.append)
        manager.play()
        engine.resize_scene(0, 60)
        assert not manager.timer.isActive()
        assert states == [True, False]

    def test_detach_unsubscribes(self, engine, renderer):
        mgr = PlaybackManager(engine, renderer)
        mgr.detach()
        engine.set_current_frame(50)
        assert renderer.calls == [("Scene 1", "#F65937", 0)]

    def test_attach_to_playing_engine_starts_timer(self, engine, renderer):
        engine.set_playback_state(True)
        mgr = PlaybackManager(engine, renderer)
        assert mgr.timer.isActive()
        mgr._tick()
        assert engine.playback.current_frame == 1
        mgr.toggle_play()
        assert engine.playback.is_playing is False
        assert not mgr.timer.isActive()
        mgr.detach()
