"""
Append-only scenario text buffer.
"""

from typing import List


class ScenarioBuffer:
    """
    Accumulates rendered reaction text for the host.

    The engine only ever appends; it never reads earlier output back to make
    decisions.
    """

    def __init__(self, initial: str = ""):
        self._chunks: List[str] = [initial] if initial else []

    def append(self, text: str) -> None:
        if not isinstance(text, str):
            raise TypeError(f"Scenario text must be str, got {type(text).__name__}")
        if text:
            self._chunks.append(text)

    @property
    def text(self) -> str:
        return "".join(self._chunks)

    @property
    def lines(self) -> List[str]:
        return self.text.splitlines()

    def __str__(self) -> str:
        return self.text

    def __len__(self) -> int:
        return len(self.text)
