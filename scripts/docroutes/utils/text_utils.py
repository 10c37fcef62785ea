"""Text helpers for scanning documentation markup and building URLs."""

from __future__ import annotations

from typing import Optional


class Cursor:
    """A forward-only cursor over a string.

    Every ``eat`` method advances the position and returns what it consumed,
    so a scanner never needs to look behind itself.
    """

    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    def done(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self) -> Optional[str]:
        if self.done():
            return None
        return self.text[self.pos]

    def eat(self) -> Optional[str]:
        """Consume one character, or return None at the end."""
        ch = self.peek()
        if ch is not None:
            self.pos += 1
        return ch

    def eat_if(self, ch: str) -> bool:
        """Consume ``ch`` if it is the next character."""
        if self.peek() == ch:
            self.pos += 1
            return True
        return False

    def eat_until(self, ch: str) -> str:
        """Consume up to (not including) ``ch`` or the end of the text."""
        start = self.pos
        end = self.text.find(ch, start)
        if end == -1:
            end = len(self.text)
        self.pos = end
        return self.text[start:end]

    def since(self, start: int) -> str:
        """Return the text consumed since position ``start``."""
        return self.text[start:self.pos]


def urlify(title: str) -> str:
    """Turn a title into a URL fragment.

    ASCII letters and digits are lowercased and kept; everything else
    becomes ``-``.
    """
    return "".join(
        ch.lower() if ch.isascii() and ch.isalnum() else "-"
        for ch in title
    )


def normalize_route(route: str) -> str:
    """Append a trailing slash unless the route has a fragment or query."""
    if "#" in route or "?" in route or route.endswith("/"):
        return route
    return route + "/"
