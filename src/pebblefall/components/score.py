from dataclasses import dataclass


@dataclass(slots=True)
class Score:
    """Running score accumulator for the current game."""

    total: int = 0
    pebbles_cleared: int = 0
    groups_cleared: int = 0
    last_chain: int = 0
    best_chain: int = 0

    def reset(self) -> None:
        self.total = 0
        self.pebbles_cleared = 0
        self.groups_cleared = 0
        self.last_chain = 0
        self.best_chain = 0
