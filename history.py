import logging
import threading
from contextlib import contextmanager
import constants

class UndoStack:
    """Linear command history with a single cursor.

    command_index points at the most recently applied command, -1 when
    nothing is applied. Commands past the cursor are the redo branch and are
    pruned by the next execute().
    """

    def __init__(self, max_depth=None):
        self.commands = []
        self.command_index = -1
        self.max_depth = max_depth
        self.logger = logging.getLogger(constants.LOGGER_NAME)
        self.lock = threading.Lock()

    def execute(self, command, scenes):
        """Applies the command to scenes and records it. Returns the new scenes."""
        with self._transition("execute"):
            try:
                new_scenes = command.apply(scenes)
            except Exception as e:
                self.logger.error(f"[HISTORY] Failed to execute '{command.description}': {e}", exc_info=True)
                raise
            del self.commands[self.command_index + 1:]
            self.commands.append(command)
            self.command_index = len(self.commands) - 1
            if self.max_depth and len(self.commands) > self.max_depth:
                dropped = len(self.commands) - self.max_depth
                del self.commands[:dropped]
                self.command_index -= dropped
            self.logger.debug(f"[HISTORY] Execute: {command.description} (index {self.command_index}, size {len(self.commands)})")
            return new_scenes

    def undo(self, scenes):
        """Reverts the current command. Returns None at the history boundary."""
        with self._transition("undo"):
            if self.command_index < 0:
                return None
            cmd = self.commands[self.command_index]
            try:
                new_scenes = cmd.revert(scenes)
            except Exception as e:
                self.logger.error(f"[HISTORY] Failed to undo '{cmd.description}': {e}", exc_info=True)
                raise
            self.command_index -= 1
            self.logger.debug(f"[HISTORY] Undo: {cmd.description} (index {self.command_index})")
            return new_scenes

    def redo(self, scenes):
        with self._transition("redo"):
            if self.command_index >= len(self.commands) - 1:
                return None
            cmd = self.commands[self.command_index + 1]
            try:
                new_scenes = cmd.apply(scenes)
            except Exception as e:
                self.logger.error(f"[HISTORY] Failed to redo '{cmd.description}': {e}", exc_info=True)
                raise
            self.command_index += 1
            self.logger.debug(f"[HISTORY] Redo: {cmd.description} (index {self.command_index})")
            return new_scenes

    @property
    def can_undo(self):
        return self.command_index >= 0

    @property
    def can_redo(self):
        return self.command_index < len(self.commands) - 1

    @property
    def undo_text(self):
        return self.commands[self.command_index].description if self.can_undo else ""

    @property
    def redo_text(self):
        return self.commands[self.command_index + 1].description if self.can_redo else ""

    def clear(self):
        with self._transition("clear"):
            self.commands.clear()
            self.command_index = -1
            self.logger.debug("[HISTORY] Cleared")

    def get_stats(self):
        return {
            "stack_count": len(self.commands),
            "command_index": self.command_index,
            "can_undo": self.can_undo,
            "can_redo": self.can_redo,
        }

    @contextmanager
    def _transition(self, action):
        if not self.lock.acquire(blocking=False):
            raise RuntimeError(f"UndoStack is not reentrant: {action} called during another transition")
        try:
            yield
        finally:
            self.lock.release()
