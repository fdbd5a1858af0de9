"""Beacon map assembly from overlapping 3D scanner reports."""

from .core.engine import AlignmentConfig, AlignmentResult, AlignmentSession, UnresolvableInputError, assemble_map
from .core.parser import ScannerParseError, load_scanners, parse_scanners
from .core.scanner import Scanner
from .core.vector import Matrix, Vector

__all__ = [
    "AlignmentConfig",
    "AlignmentResult",
    "AlignmentSession",
    "Matrix",
    "Scanner",
    "ScannerParseError",
    "UnresolvableInputError",
    "Vector",
    "assemble_map",
    "load_scanners",
    "parse_scanners",
]
