"""
Log-text source: reads combat log files and cuts encounter windows.
"""

import logging
import re
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence

from .tokenizer import LineTokenizer, LogLine

logger = logging.getLogger(__name__)

_NEWLINE_RE = re.compile(r"\r?\n")


class CombatLogParser:
    """
    Reads raw log text and tokenizes it.

    Handles file reading and line splitting; all analysis happens downstream
    on the returned lines.
    """

    def __init__(self, buffer_size: int = 1024 * 1024):
        """
        Initialize the combat log parser.

        Args:
            buffer_size: Size of read buffer for file streaming
        """
        self.tokenizer = LineTokenizer()
        self.buffer_size = buffer_size
        self.current_file: Optional[Path] = None

    @staticmethod
    def split_text(text: str) -> List[str]:
        """Split log text into non-empty lines."""
        return [line for line in _NEWLINE_RE.split(text) if line]

    def read_lines(
        self,
        file_path: str,
        progress_callback: Optional[Callable[[float, int, int], None]] = None,
    ) -> List[str]:
        """
        Read a combat log file into non-empty lines.

        Args:
            file_path: Path to the combat log file
            progress_callback: Optional callback(progress, bytes_read, file_size)

        Returns:
            Raw lines in file order
        """
        file_path = Path(file_path)
        if not file_path.exists():
            raise FileNotFoundError(f"Combat log file not found: {file_path}")

        self.current_file = file_path
        file_size = file_path.stat().st_size
        logger.info(f"Reading {file_path.name} ({file_size / 1024 / 1024:.1f} MB)")

        chunks = []
        bytes_read = 0
        with open(file_path, "r", encoding="utf-8", errors="ignore") as f:
            while True:
                chunk = f.read(self.buffer_size)
                if not chunk:
                    break
                chunks.append(chunk)
                bytes_read += len(chunk.encode("utf-8"))
                if progress_callback:
                    progress_callback(bytes_read / max(file_size, 1), bytes_read, file_size)

        lines = self.split_text("".join(chunks))
        logger.info(f"Read {len(lines)} lines from {file_path.name}")
        return lines

    def tokenize(self, lines: Sequence[str]) -> List[LogLine]:
        return self.tokenizer.parse_lines(lines)

    def get_stats(self) -> Dict[str, Any]:
        return {
            "file": str(self.current_file) if self.current_file else None,
            "tokenizer_stats": self.tokenizer.get_stats(),
        }

    def reset(self):
        """Reset parser state for new file."""
        self.tokenizer = LineTokenizer()
        self.current_file = None


def extract_encounter_lines(
    lines: Sequence[LogLine],
    start: datetime,
    end: datetime,
    buffer_ms: int = 5000,
) -> List[LogLine]:
    """
    Lines whose timestamp falls inside an encounter window.

    The window is ``[start - buffer, end + buffer]``; lines without a parsable
    timestamp are dropped.
    """
    buffer = timedelta(milliseconds=buffer_ms)
    window_start = start - buffer
    window_end = end + buffer
    return [
        line
        for line in lines
        if line.timestamp is not None and window_start <= line.timestamp <= window_end
    ]
