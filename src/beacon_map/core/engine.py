from __future__ import annotations

import enum
import hashlib
import logging
import math
import struct
from collections.abc import Sequence
from dataclasses import dataclass

from ..invariants.rotation_group import build_compose_table
from .rotations import ROTATION_INDEX, ROTATIONS
from .scanner import Fingerprint, Scanner
from .vector import IDENTITY, ORIGIN, Vector, multiply

logger = logging.getLogger(__name__)

ROTATION_GROUP = build_compose_table()


class UnresolvableInputError(RuntimeError):
    """Raised when some scanners can never be aligned to the anchor."""

    def __init__(self, message: str, unresolved: Sequence[int]):
        self.unresolved = tuple(unresolved)
        super().__init__(f"{message}; unresolved scanners: {list(self.unresolved)}")


@dataclass(frozen=True, slots=True)
class AlignmentConfig:
    """Alignment tuning.

    min_overlap: beacons two scanners must share for a transform to be accepted.
    min_common_distances: pre-filter on shared normalized distances; defaults
        to C(min_overlap, 2), the pair count of min_overlap common beacons.
    max_rounds: cap on frontier rounds; None means one round per scanner.
    cache_rotations: keep rotated copies of raw scanners between candidates.
    """

    min_overlap: int = 12
    min_common_distances: int | None = None
    max_rounds: int | None = None
    cache_rotations: bool = True

    def __post_init__(self) -> None:
        if self.min_overlap < 2:
            raise ValueError("min_overlap must be >= 2")
        if self.min_common_distances is None:
            object.__setattr__(self, "min_common_distances", math.comb(self.min_overlap, 2))
        elif self.min_common_distances < 0:
            raise ValueError("min_common_distances must be >= 0")
        if self.max_rounds is not None and self.max_rounds < 1:
            raise ValueError("max_rounds must be >= 1")


class ScannerStatus(enum.Enum):
    UNKNOWN = "unknown"
    KNOWN = "known"


@dataclass(slots=True)
class ScannerState:
    status: ScannerStatus = ScannerStatus.UNKNOWN
    orientation: int | None = None
    position: Vector | None = None
    # Beacons in the global frame once known.
    beacons: Scanner | None = None
    # Index of the known scanner this one was aligned against.
    reference: int | None = None


@dataclass(frozen=True, slots=True)
class AlignmentResult:
    beacons: frozenset[Vector]
    scanner_positions: tuple[Vector | None, ...]
    orientations: tuple[int | None, ...]
    rounds: int

    @property
    def beacon_map(self) -> frozenset[Vector]:
        return self.beacons

    @property
    def scanner_map(self) -> frozenset[Vector]:
        return frozenset(p for p in self.scanner_positions if p is not None)

    @property
    def complete(self) -> bool:
        return all(p is not None for p in self.scanner_positions)

    def _canonical_bytes(self) -> bytes:
        # little-endian int64 array: [n_beacons] + sorted beacons + [n_scanners] + positions
        values: list[int] = [len(self.beacons)]
        for b in sorted(self.beacons):
            values.extend(b)
        values.append(len(self.scanner_positions))
        for p, o in zip(self.scanner_positions, self.orientations):
            if p is None or o is None:
                values.extend((0, 0, 0, 0, -1))
            else:
                values.extend((1, *p, o))
        return struct.pack("<" + "q" * len(values), *values)

    def hash(self) -> str:
        return hashlib.sha256(self._canonical_bytes()).hexdigest()


class AlignmentSession:
    """Resolves every scanner into the frame of scanner 0.

    The session owns all scanner state. Scanners are referred to by their
    index into `scanners`; raw reports are never mutated, resolved copies
    live on the matching `ScannerState`.
    """

    def __init__(self, scanners: Sequence[Scanner], config: AlignmentConfig | None = None):
        if not scanners:
            raise ValueError("at least one scanner is required")
        self.config = config if config is not None else AlignmentConfig()
        self.scanners: list[Scanner] = list(scanners)
        self.states: list[ScannerState] = [ScannerState() for _ in self.scanners]
        self.rounds = 0

        # Keys are invariant under rotation and translation, so the raw
        # reports give the same key sets as their resolved copies.
        self._raw_fingerprints: list[Fingerprint] = [s.fingerprint() for s in self.scanners]
        self.distance_keys: list[frozenset[Vector]] = [frozenset(fp) for fp in self._raw_fingerprints]
        self._resolved_fingerprints: dict[int, Fingerprint] = {}
        self._rotated: dict[tuple[int, int], tuple[Vector, ...]] = {}

        self.beacon_map: set[Vector] = set()
        self.unknown: set[int] = set(range(1, len(self.scanners)))
        self._frontier: list[int] = []

        anchor = self.scanners[0]
        self._mark_known(0, ROTATION_INDEX[IDENTITY], ORIGIN, anchor, reference=None)
        self._resolved_fingerprints[0] = self._raw_fingerprints[0]
        logger.info(
            "alignment session: %d scanners, min_overlap=%d, min_common_distances=%d",
            len(self.scanners),
            self.config.min_overlap,
            self.config.min_common_distances,
        )

    @property
    def scanner_map(self) -> set[Vector]:
        return {s.position for s in self.states if s.position is not None}

    def known(self) -> list[int]:
        return [i for i, s in enumerate(self.states) if s.status is ScannerStatus.KNOWN]

    def _mark_known(
        self,
        index: int,
        orientation: int,
        position: Vector,
        beacons: Scanner,
        reference: int | None,
    ) -> None:
        state = self.states[index]
        state.status = ScannerStatus.KNOWN
        state.orientation = orientation
        state.position = position
        state.beacons = beacons
        state.reference = reference
        self.beacon_map.update(beacons)
        self.unknown.discard(index)
        self._frontier.append(index)

    def _rotated_points(self, index: int, op_id: int) -> tuple[Vector, ...]:
        key = (index, op_id)
        cached = self._rotated.get(key)
        if cached is not None:
            return cached
        m = ROTATIONS[op_id]
        pts = tuple(multiply(p, m) for p in self.scanners[index])
        if self.config.cache_rotations:
            self._rotated[key] = pts
        return pts

    def _try_align(self, known_index: int, unknown_index: int) -> bool:
        """Search for a transform placing `unknown_index` onto `known_index`.

        Every shared normalized distance pairs a beacon pair of the known
        scanner with one of the unknown scanner; each beacon pairing under each
        rotation proposes an offset, which is accepted when enough of the
        unknown scanner's beacons land on known beacons.
        """
        common = self.distance_keys[known_index] & self.distance_keys[unknown_index]
        if len(common) < self.config.min_common_distances:
            logger.debug(
                "skip %d -> %d: %d common distances (< %d)",
                unknown_index,
                known_index,
                len(common),
                self.config.min_common_distances,
            )
            return False

        resolved = self.states[known_index].beacons
        if resolved is None:
            raise AssertionError(f"reference scanner {known_index} is not resolved")
        known_beacons = resolved.beacons
        known_fp = self._resolved_fingerprints[known_index]
        unknown_fp = self._raw_fingerprints[unknown_index]
        need = self.config.min_overlap

        tried: set[tuple[int, Vector]] = set()
        for key in sorted(common):
            for known_pair in known_fp[key]:
                for unknown_pair in unknown_fp[key]:
                    for kb in known_pair:
                        for ub in unknown_pair:
                            for op_id, m in enumerate(ROTATIONS):
                                offset = kb - multiply(ub, m)
                                if (op_id, offset) in tried:
                                    continue
                                tried.add((op_id, offset))

                                rotated = self._rotated_points(unknown_index, op_id)
                                overlap = sum(1 for p in rotated if p + offset in known_beacons)
                                if overlap >= need:
                                    self._accept(known_index, unknown_index, op_id, offset, overlap)
                                    return True

        logger.debug(
            "no alignment %d -> %d after %d candidates", unknown_index, known_index, len(tried)
        )
        return False

    def _accept(self, known_index: int, unknown_index: int, op_id: int, offset: Vector, overlap: int) -> None:
        resolved = Scanner(frozenset(p + offset for p in self._rotated_points(unknown_index, op_id)))
        self._mark_known(unknown_index, op_id, offset, resolved, reference=known_index)
        self._resolved_fingerprints[unknown_index] = resolved.fingerprint()
        logger.info(
            "resolved scanner %d at %s (rotation %d, %d shared beacons with scanner %d)",
            unknown_index,
            offset.astuple(),
            op_id,
            overlap,
            known_index,
        )

    def run(self) -> AlignmentResult:
        """Expand the known set until every scanner is resolved.

        Each round uses the scanners resolved in the previous round as
        references against every remaining unknown scanner. A reference that
        failed against a scanner fails again later, so an empty frontier with
        scanners still unknown means the overlap graph is disconnected.
        """
        max_rounds = self.config.max_rounds if self.config.max_rounds is not None else len(self.scanners)

        while self.unknown:
            if not self._frontier:
                raise UnresolvableInputError("no known scanner overlaps the rest", sorted(self.unknown))
            if self.rounds >= max_rounds:
                raise UnresolvableInputError(f"exceeded {max_rounds} alignment rounds", sorted(self.unknown))

            self.rounds += 1
            frontier, self._frontier = self._frontier, []
            before = len(self.unknown)
            for i in frontier:
                for j in sorted(self.unknown):
                    self._try_align(i, j)

            logger.info(
                "round %d: %d references, %d resolved, %d unknown remaining",
                self.rounds,
                len(frontier),
                before - len(self.unknown),
                len(self.unknown),
            )

        return self.result()

    def result(self) -> AlignmentResult:
        return AlignmentResult(
            beacons=frozenset(self.beacon_map),
            scanner_positions=tuple(s.position for s in self.states),
            orientations=tuple(s.orientation for s in self.states),
            rounds=self.rounds,
        )

    def audit(self) -> None:
        # NON-MUTATING: must leave the session exactly as it found it.
        before_hash = self.result().hash()
        try:
            self._audit_states()
            self._audit_roundtrip()
        finally:
            if self.result().hash() != before_hash:
                raise AssertionError("audit() mutated session state (hash mismatch)")

    def _audit_states(self) -> None:
        anchor = self.states[0]
        if anchor.status is not ScannerStatus.KNOWN or anchor.position != ORIGIN:
            raise AssertionError("scanner 0 must be known at the origin")

        expected_unknown = {i for i, s in enumerate(self.states) if s.status is ScannerStatus.UNKNOWN}
        if expected_unknown != self.unknown:
            raise AssertionError("unknown set disagrees with scanner states")

        merged: set[Vector] = set()
        for i, s in enumerate(self.states):
            if s.status is ScannerStatus.UNKNOWN:
                if s.position is not None or s.beacons is not None:
                    raise AssertionError(f"unknown scanner {i} carries a resolution")
                continue
            if s.orientation is None or s.position is None or s.beacons is None:
                raise AssertionError(f"known scanner {i} is missing its resolution")
            merged.update(s.beacons)

        if merged != self.beacon_map:
            raise AssertionError("beacon map is not the union of resolved scanners")

    def _audit_roundtrip(self) -> None:
        for i, s in enumerate(self.states):
            if s.status is not ScannerStatus.KNOWN:
                continue
            beacons, position, orientation = s.beacons, s.position, s.orientation
            if beacons is None or position is None or orientation is None:
                raise AssertionError(f"known scanner {i} is missing its resolution")
            inv_id = ROTATION_GROUP.inverse(orientation)
            if ROTATION_GROUP.compose(orientation, inv_id) != ROTATION_INDEX[IDENTITY]:
                raise AssertionError(f"orientation {orientation} of scanner {i} has no inverse")
            inv = ROTATIONS[inv_id]
            restored = Scanner.of(multiply(p - position, inv) for p in beacons)
            if restored != self.scanners[i]:
                raise AssertionError(f"undoing the transform of scanner {i} did not restore its report")
            if beacons.distance_keys() != self.distance_keys[i]:
                raise AssertionError(f"fingerprint of scanner {i} changed under its transform")


def assemble_map(
    scanners: Sequence[Scanner], config: AlignmentConfig | None = None
) -> tuple[frozenset[Vector], frozenset[Vector]]:
    """Return (scanner_map, beacon_map) in the frame of scanner 0."""
    result = AlignmentSession(scanners, config).run()
    return result.scanner_map, result.beacon_map
