from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # Strong refs: systems are often built without being stored anywhere.
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn):
        sig = self._signals.get(name)
        if sig:
            sig.disconnect(fn)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# SYSTEM & TIMING
# ============================================================================
EVENT_TICK = "tick"                                    # payload: dt=float


# ============================================================================
# PIECE COMMANDS (input layer -> engine)
# ============================================================================
EVENT_PIECE_SPAWN_REQUEST = "piece_spawn_request"      # payload: pivot_color, rotating_color, pivot=(x,y)|None, offset=(dx,dy)|None
EVENT_PIECE_MOVE_REQUEST = "piece_move_request"        # payload: direction=MoveDirection|str
EVENT_PIECE_ROTATE_REQUEST = "piece_rotate_request"    # payload: direction=RotateDirection|str
EVENT_PIECE_DROP_REQUEST = "piece_drop_request"        # payload: None


# ============================================================================
# PIECE LIFECYCLE
# ============================================================================
EVENT_PIECE_SPAWNED = "piece_spawned"                  # payload: entity=int, cells=[((x,y), color), ...]
EVENT_PIECE_SPAWN_BLOCKED = "piece_spawn_blocked"      # payload: cells=[(x,y), ...]
EVENT_PIECE_MOVED = "piece_moved"                      # payload: direction=MoveDirection, cells=[((x,y), color), ...]
EVENT_PIECE_ROTATED = "piece_rotated"                  # payload: direction=RotateDirection, kick=(dx,dy), cells=[((x,y), color), ...]
EVENT_PIECE_DROPPED = "piece_dropped"                  # payload: cells=[((x,y), color), ...]
EVENT_PIECE_LANDED = "piece_landed"                    # payload: cells=[((x,y), color), ...]
EVENT_PIECE_DISCARDED = "piece_discarded"              # payload: cells=[((x,y), color), ...]
EVENT_PIECE_SETTLED = "piece_settled"                  # payload: moves=[GravityMove, ...]


# ============================================================================
# MATCH & CHAIN
# ============================================================================
EVENT_MATCH_FOUND = "match_found"                      # payload: groups=[[(x,y),...],...], group_count=int, size=int, depth=int
EVENT_MATCH_CLEARED = "match_cleared"                  # payload: positions=[(x,y),...], colors=[((x,y), color),...], depth=int, score_delta=int, score=int
EVENT_GRAVITY_APPLIED = "gravity_applied"              # payload: moves=[GravityMove, ...], depth=int
EVENT_CHAIN_COMPLETE = "chain_complete"                # payload: depth=int, score_delta=int, score=int
EVENT_SCORE_CHANGED = "score_changed"                  # payload: score=int, delta=int


# ============================================================================
# SPAWNING
# ============================================================================
EVENT_SPAWN_READY = "spawn_ready"                      # payload: None
EVENT_NEXT_PIECES_CHANGED = "next_pieces_changed"      # payload: upcoming=[(pivot_color, rotating_color), ...]


# ============================================================================
# GAME FLOW & STATE
# ============================================================================
EVENT_GAME_START_REQUEST = "game_start_request"        # payload: None
EVENT_GAME_STARTED = "game_started"                    # payload: None
EVENT_GAME_MODE_CHANGED = "game_mode_changed"          # payload: previous_mode=GameMode|None, new_mode=GameMode
EVENT_GAME_OVER = "game_over"                          # payload: score=int, reason=str
