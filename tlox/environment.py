from typing import Any, Dict, List, Optional

from tlox.errors import RuntimeFailure
from tlox.tokens import Token


class Environment:
    """Stack of scope frames mapping variable names to values.

    Frame 0 is the global frame and always exists. Blocks and calls push
    a frame on entry and pop it on exit, so a binding lives exactly as
    long as the block or call that declared it.
    """
    def __init__(self):
        self.frames: List[Dict[str, Any]] = [{}]

    @property
    def globals(self) -> Dict[str, Any]:
        return self.frames[0]

    @property
    def depth(self) -> int:
        return len(self.frames)

    def push(self, frame: Optional[Dict[str, Any]] = None) -> None:
        self.frames.append(frame if frame is not None else {})

    def pop(self) -> Dict[str, Any]:
        if len(self.frames) == 1:
            raise RuntimeError('cannot pop the global frame')
        return self.frames.pop()

    def define(self, name: str, value: Any) -> None:
        # declarations always bind in the innermost frame
        self.frames[-1][name] = value

    def find(self, name: str) -> Optional[Dict[str, Any]]:
        for frame in reversed(self.frames):
            if name in frame:
                return frame
        return None

    def get(self, name: Token) -> Any:
        frame = self.find(name.lexeme)
        if frame is None:
            raise RuntimeFailure(name, f"Undefined variable '{name.lexeme}'.")
        return frame[name.lexeme]

    def assign(self, name: str, value: Any) -> None:
        """Update the nearest binding of ``name``; unknown names become globals."""
        frame = self.find(name)
        if frame is None:
            frame = self.globals
        frame[name] = value

    def lookup(self, name: str, default: Any = None) -> Any:
        frame = self.find(name)
        if frame is None:
            return default
        return frame[name]

    def snapshot(self) -> List[Dict[str, Any]]:
        return [dict(frame) for frame in self.frames]
