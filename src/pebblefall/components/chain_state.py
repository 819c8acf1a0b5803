from dataclasses import dataclass


@dataclass(slots=True)
class ChainState:
    """Tracks the match/gravity cycle shared across systems."""

    active: bool = False
    depth: int = 0
