"""
High-score persistence as newline-delimited decimal text.

Every read or write failure is absorbed here: a missing or unreadable file
reads as no scores, malformed lines are skipped, and a failed write leaves
the caller's session untouched.
"""

from __future__ import annotations

import pathlib

DEFAULT_SCORE_FILE = "highscore.txt"


class ScoreStore:
    """Sorted list of past final scores stored in a flat file.

    Attributes:
        path: Location of the score file.
    """

    def __init__(self, path: str | pathlib.Path = DEFAULT_SCORE_FILE) -> None:
        self.path = pathlib.Path(path)

    def load(self) -> list[int]:
        """Return every stored score, highest first."""
        try:
            data = self.path.read_bytes()
        except OSError:
            return []

        scores = []
        for raw in data.splitlines():
            score = self._parse_line(raw)
            if score is not None:
                scores.append(score)
        scores.sort(reverse=True)
        return scores

    @staticmethod
    def _parse_line(raw: bytes) -> int | None:
        """Parse one line of plain ASCII digits, or return None."""
        try:
            text = raw.decode("ascii").strip()
        except UnicodeDecodeError:
            return None
        # ASCII-only at this point, so isdigit() means 0-9
        if not text.isdigit():
            return None
        return int(text)

    def top(self, count: int = 10) -> list[int]:
        """Return the best `count` scores, highest first."""
        return self.load()[:count]

    def high_score(self) -> int:
        """Return the best stored score, or 0 when there is none."""
        scores = self.load()
        return scores[0] if scores else 0

    def save(self, score: int) -> bool:
        """Merge a final score into the file and rewrite it sorted.

        Scores of 0 or less are not stored. No cap is applied on write.

        Returns:
            True if the file was rewritten, False otherwise.
        """
        if score <= 0:
            return False
        scores = self.load()
        scores.append(score)
        scores.sort(reverse=True)
        try:
            self.path.write_text(
                "".join(f"{s}\n" for s in scores), encoding="utf-8"
            )
        except OSError:
            return False
        return True
