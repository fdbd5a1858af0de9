from __future__ import annotations

import logging
import re
from pathlib import Path

from .scanner import Scanner
from .vector import Vector

logger = logging.getLogger(__name__)

_HEADER = re.compile(r"^---\s*scanner\s+(-?\d+)\s*---$")
_TRIPLE = re.compile(r"^(-?\d+),(-?\d+),(-?\d+)$")


class ScannerParseError(ValueError):
    """Malformed scanner report; carries the 1-based line number."""

    def __init__(self, message: str, line_no: int | None = None, text: str | None = None):
        self.line_no = line_no
        self.text = text
        where = f"line {line_no}: " if line_no is not None else ""
        detail = f" ({text!r})" if text is not None else ""
        super().__init__(f"{where}{message}{detail}")


def _parse_beacon(line: str, line_no: int) -> Vector:
    m = _TRIPLE.match(line.replace(" ", ""))
    if m is None:
        raise ScannerParseError("expected a beacon triple 'x,y,z'", line_no, line)
    x, y, z = (int(g) for g in m.groups())
    return Vector(x, y, z)


def parse_scanners(text: str) -> list[Scanner]:
    """Parse blank-line separated `--- scanner N ---` blocks.

    Block order defines the scanner index; header numbers are only labels.
    """
    scanners: list[Scanner] = []
    beacons: list[Vector] | None = None

    for line_no, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line:
            if beacons is not None:
                scanners.append(Scanner.of(beacons))
                beacons = None
            continue

        if beacons is None:
            m = _HEADER.match(line)
            if m is None:
                raise ScannerParseError("expected a '--- scanner N ---' header", line_no, line)
            label = int(m.group(1))
            if label != len(scanners):
                logger.warning(
                    "scanner header %d at line %d is block %d; using block order",
                    label,
                    line_no,
                    len(scanners),
                )
            beacons = []
            continue

        if _HEADER.match(line):
            raise ScannerParseError("scanner header without a preceding blank line", line_no, line)
        beacons.append(_parse_beacon(line, line_no))

    if beacons is not None:
        scanners.append(Scanner.of(beacons))

    if not scanners:
        raise ScannerParseError("input contains no scanners")

    logger.debug("parsed %d scanners", len(scanners))
    return scanners


def load_scanners(path: str | Path) -> list[Scanner]:
    return parse_scanners(Path(path).read_text(encoding="utf-8"))
