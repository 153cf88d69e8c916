"""Central configuration for the board, the agents and the batch runner."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

# Logging
DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)-12s - %(levelname)-8s - %(message)s"


def configure_logging(level: int = logging.INFO) -> None:
    """Configure root logging if the host application has not done so already.

    This keeps the package library-friendly (it will not override an existing logging setup),
    while preserving CLI ergonomics.
    """
    root = logging.getLogger()
    if root.handlers:
        return
    logging.basicConfig(level=level, format=DEFAULT_LOG_FORMAT, stream=sys.stdout)


configure_logging()

logger = logging.getLogger("hamsnake")


# ----------------------------
# Paths / run logs
# ----------------------------
REPO_ROOT = Path(__file__).resolve().parents[1]


def _default_runs_dir() -> Path:
    """Resolve the runs directory (supports env override)."""
    raw = os.environ.get("HAMSNAKE_RUNS_DIR")
    if raw:
        return Path(raw).expanduser().resolve()
    return REPO_ROOT / "runs"


RUNS_DIR = _default_runs_dir()


def set_runs_dir(runs_dir: str | Path) -> None:
    """Update the directory used for JSONL run logs and agent traces."""
    global RUNS_DIR
    RUNS_DIR = Path(runs_dir).expanduser().resolve()
    RUNS_DIR.mkdir(parents=True, exist_ok=True)


# ----------------------------
# Board & rendering
# ----------------------------
# Both dimensions must be even: the cell-tree and Hamiltonian layers tile the
# board with 2x2 cells.
BOARD_WIDTH = 20
BOARD_HEIGHT = 20
CELL_PIXELS = 32
FPS = 30
UI_DEBUG_MODE = False

# Safety caps / logging
MAX_TURNS_PER_GAME = 1_000_000
PROGRESS_LOG_INTERVAL = 10_000


# ----------------------------
# Agents
# ----------------------------
DEFAULT_AGENT = "cell_tree"

# Base cost of one step for the cell-tree A*. Penalties are added on top, so
# this is also the admissible lower bound handed to the heuristic.
STEP_COST = 1000

# Dynamic Hamiltonian cycle repair: each step costs this plus the destination's
# distance to the goal along the current cycle.
DHCR_CYCLE_COST = 1000
# Number of ticks to keep hugging the last turn once a detour is predicted.
# 0 disables wall-follow mode.
WALL_FOLLOW_OVERSHOOT = 0

# Perturbed Hamiltonian cycle shortcut limits.
PHC_MAX_FILL = 0.5
PHC_TAIL_MARGIN = 3
PHC_GROWTH_SLACK = 10


# ----------------------------
# Batch runs
# ----------------------------
DEFAULT_NUM_GAMES = 100
DEFAULT_WORKERS = 4
DEFAULT_SEED = 1234567891


def validate_config() -> None:
    """Basic sanity checks."""
    ok = True
    if BOARD_WIDTH < 2 or BOARD_HEIGHT < 2:
        logger.error("Board must be at least 2x2")
        ok = False
    if BOARD_WIDTH % 2 or BOARD_HEIGHT % 2:
        logger.error("BOARD_WIDTH and BOARD_HEIGHT must be even (got %dx%d)", BOARD_WIDTH, BOARD_HEIGHT)
        ok = False
    if MAX_TURNS_PER_GAME < 1:
        logger.error("MAX_TURNS_PER_GAME must be >= 1")
        ok = False
    if STEP_COST < 1 or DHCR_CYCLE_COST < 1:
        logger.error("STEP_COST and DHCR_CYCLE_COST must be >= 1")
        ok = False
    if WALL_FOLLOW_OVERSHOOT < 0:
        logger.error("WALL_FOLLOW_OVERSHOOT must be >= 0")
        ok = False
    if not 0.0 <= PHC_MAX_FILL <= 1.0:
        logger.error("PHC_MAX_FILL must be within [0, 1]")
        ok = False
    if not ok:
        raise SystemExit(1)
