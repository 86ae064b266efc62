import sys
import os
import logging
import traceback
from PyQt5.QtCore import QCoreApplication, QTimer
from system import setup_system, StreamToLogger, ConfigManager, EngineSettings
from timeline import TimelineEngine
from playback_manager import PlaybackManager, Renderer, format_time
import constants

def exception_hook(exctype, value, tb):
    err_msg = "".join(traceback.format_exception(exctype, value, tb))
    logger = logging.getLogger(constants.LOGGER_NAME)
    logger.critical(f"CORE CRASH DETECTED:\n{err_msg}")
    sys.__excepthook__(exctype, value, tb)

class LoggingRenderer(Renderer):
    """Headless renderer that logs scene boundaries instead of painting."""

    def __init__(self):
        self.logger = logging.getLogger(constants.LOGGER_NAME)

    def render_scene(self, scene_name, scene_color, local_frame):
        if local_frame == 0:
            self.logger.info(f"[RENDER] {scene_name} ({scene_color})")

    def clear(self):
        self.logger.info("[RENDER] Cleared")

def main(argv=None):
    base_dir = os.getcwd()
    logger = setup_system(base_dir)
    if not any(type(h) is logging.StreamHandler and h.stream is sys.__stdout__ for h in logger.handlers):
        logger.addHandler(logging.StreamHandler(sys.__stdout__))
    saved_hook, saved_stderr = sys.excepthook, sys.stderr
    sys.excepthook = exception_hook
    sys.stderr = StreamToLogger(logger, logging.ERROR)
    try:
        config = ConfigManager(os.path.join(base_dir, constants.CONFIG_FILE_NAME))
        settings = EngineSettings.from_config(config)
        app = QCoreApplication.instance() or QCoreApplication(argv if argv is not None else sys.argv)
        engine = TimelineEngine(settings=settings)
        manager = PlaybackManager(engine, LoggingRenderer())
        logger.info(f"Playing {len(engine.scenes)} scenes, {format_time(engine.total_frames, settings.fps)} total")

        def on_frame(frame):
            if frame == engine.total_frames - 1:
                manager.pause()

        def on_state(is_playing):
            if not is_playing:
                QTimer.singleShot(0, app.quit)
        manager.frame_changed.connect(on_frame)
        manager.state_changed.connect(on_state)
        code = 0
        if engine.total_frames > 1:
            manager.play()
            code = app.exec_()
        manager.detach()
        logger.info(f"Stopped at frame {engine.playback.current_frame}")
        return code
    finally:
        sys.stderr.flush()
        sys.excepthook, sys.stderr = saved_hook, saved_stderr

if __name__ == "__main__":
    sys.exit(main())
