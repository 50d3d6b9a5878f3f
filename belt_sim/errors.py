from __future__ import annotations

from typing import Optional


class BeltSimError(Exception):
    """Base class for every error raised by the belt engine."""


class DegenerateVector(BeltSimError, ValueError):
    """Normalization of a zero-length vector."""


class InvariantViolation(BeltSimError):
    """The transport model reached a state it considers impossible.

    kind is one of:
    - 'excess-out-of-range'    drained item overshot the handoff by >= half a lane
    - 'out-lane-overtake'      merge into an Out lane would overtake its front item, or
                               the Out lane holds a ready item behind a waiting one
    - 'neighbor-lane-overtake' handoff into a neighbor lane would overtake its front item
    - 'input-lane-overtake'    an input lane holds a ready item behind a waiting one
    """

    KINDS = (
        "excess-out-of-range",
        "out-lane-overtake",
        "neighbor-lane-overtake",
        "input-lane-overtake",
    )

    def __init__(self, kind: str, detail: str = "") -> None:
        if kind not in self.KINDS:
            raise ValueError(f"Unknown invariant kind '{kind}'")
        self.kind = kind
        self.detail = detail
        msg = kind if not detail else f"{kind}: {detail}"
        super().__init__(msg)


class MissingNeighborLane(BeltSimError):
    """An output link points at a belt that no longer exists."""


class SimulationHalted(BeltSimError):
    """Raised by BeltSystem.step after an earlier tick failed."""

    def __init__(self, cause: Optional[BaseException] = None) -> None:
        self.cause = cause
        super().__init__(f"simulation halted after failure: {cause!r}")
