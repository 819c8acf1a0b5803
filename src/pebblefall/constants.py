GRID_COLS = 6
GRID_ROWS = 12

# Minimum connected group size that clears.
MATCH_THRESHOLD = 4

# Score = cleared pebbles * PEBBLE_SCORE + cleared groups * CHAIN_BONUS, per chain step.
PEBBLE_SCORE = 10
CHAIN_BONUS = 50

# New pieces appear horizontally: pivot at SPAWN_PIVOT, rotating cell one column right.
SPAWN_PIVOT = (2, 0)
SPAWN_OFFSET = (1, 0)
# Row 0 of these columns being occupied ends the game.
GAME_OVER_COLUMNS = (2, 3)

# Fall rates in rows per second.
FALL_SPEED = 1.5
DROP_SPEED = 16.0
# Display column catch-up rate in columns per second (presentation smoothing only).
SLIDE_SPEED = 12.0
# A piece resting within this many rows of its floor is considered landed.
LANDING_THRESHOLD = 0.05

# Chance for each spawned pebble to be a glowing wildcard.
WILDCARD_CHANCE = 0.05
# Number of upcoming pairs kept visible in the preview queue.
PREVIEW_COUNT = 2
# Seconds between the end of a chain and the next spawn.
SPAWN_DELAY = 0.0
