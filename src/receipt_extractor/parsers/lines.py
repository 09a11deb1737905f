"""Line splitting and noise filtering for OCR text."""

from typing import List

MIN_LINE_LENGTH = 4


def normalize_lines(text: str) -> List[str]:
    """
    Split OCR text into trimmed candidate lines, top to bottom.

    Lines shorter than 4 characters or without any letter or digit
    (separator rules, stray punctuation, blanks) are dropped.
    """
    lines = []
    for line in text.splitlines():
        line = line.strip()
        if len(line) < MIN_LINE_LENGTH:
            continue
        if not any(ch.isalnum() for ch in line):
            continue
        lines.append(line)
    return lines
