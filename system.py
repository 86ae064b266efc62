import os
import logging
import json
import threading
from dataclasses import dataclass
from logging.handlers import RotatingFileHandler
import constants

class StreamToLogger:
    """File-like sink that forwards complete lines to a logger."""

    def __init__(self, logger, level=logging.ERROR):
        self.logger = logger
        self.level = level
        self._partial = ""

    def write(self, text):
        self._partial += text
        *lines, self._partial = self._partial.split("\n")
        for line in lines:
            if line.strip():
                self.logger.log(self.level, line.rstrip())
        return len(text)

    def flush(self):
        if self._partial.strip():
            self.logger.log(self.level, self._partial.rstrip())
        self._partial = ""

def setup_system(base_dir, level=logging.DEBUG):
    log_dir = os.path.abspath(os.path.join(base_dir, 'logs'))
    os.makedirs(log_dir, exist_ok=True)
    fmt = logging.Formatter('%(asctime)s | %(name)-10s | %(levelname)-8s | %(message)s')
    logger = logging.getLogger(constants.LOGGER_NAME)
    logger.setLevel(level)
    f_path = os.path.join(log_dir, 'Scene_Timeline.log')
    if not any(isinstance(h, RotatingFileHandler) and h.baseFilename == f_path for h in logger.handlers):
        h = RotatingFileHandler(f_path, maxBytes=10*1024*1024, backupCount=5, encoding='utf-8')
        h.setFormatter(fmt)
        logger.addHandler(h)
    return logger

class ConfigManager:

    def __init__(self, path):
        self.path = path
        self.data = {}
        self.lock = threading.Lock()
        self.logger = logging.getLogger(constants.LOGGER_NAME)
        self.load()

    def load(self):
        with self.lock:
            if os.path.exists(self.path):
                try:
                    with open(self.path, 'r', encoding='utf-8') as f: self.data = json.load(f)
                except (OSError, ValueError) as e:
                    self.logger.warning(f"[CONFIG] Could not read {self.path}, using defaults: {e}")
                    self.data = {}
                if not isinstance(self.data, dict):
                    self.logger.warning(f"[CONFIG] {self.path} is not a JSON object, using defaults")
                    self.data = {}

    def save(self):
        with self.lock:
            os.makedirs(os.path.dirname(os.path.abspath(self.path)), exist_ok=True)
            with open(self.path, 'w', encoding='utf-8') as f: json.dump(self.data, f, indent=4)

    def get(self, k, default=None): return self.data.get(k, default)

    def set(self, k, v):
        self.data[k] = v
        self.save()
@dataclass

class EngineSettings:
    fps: float = constants.DEFAULT_FPS
    min_scene_length: int = constants.MIN_SCENE_LENGTH
    default_scene_length: int = constants.DEFAULT_SCENE_LENGTH
    history_depth: int = 0

    def __post_init__(self):
        if self.fps <= 0:
            raise ValueError(f"fps must be positive, got {self.fps}")
        if self.min_scene_length < 1:
            raise ValueError(f"min_scene_length must be at least 1, got {self.min_scene_length}")
        if self.default_scene_length < self.min_scene_length:
            raise ValueError(
                f"default_scene_length {self.default_scene_length} is below min_scene_length {self.min_scene_length}")
        if self.history_depth < 0:
            raise ValueError(f"history_depth must not be negative, got {self.history_depth}")
    @classmethod

    def from_config(cls, config):
        return cls(
            fps=float(config.get('fps', constants.DEFAULT_FPS)),
            min_scene_length=int(config.get('min_scene_length', constants.MIN_SCENE_LENGTH)),
            default_scene_length=int(config.get('default_scene_length', constants.DEFAULT_SCENE_LENGTH)),
            history_depth=int(config.get('history_depth', 0)),
        )
