"""Snake simulation with optional pygame rendering."""

from __future__ import annotations

import logging
from collections import deque
from enum import Enum
from typing import Any, Deque, Dict, Iterable, List, Optional, Tuple

from . import config
from .geometry import INVALID, Coord, Dir, is_neighbor, step
from .grid import Grid
from .rng import RandomSource

logger = logging.getLogger(__name__)


def _import_pygame():
    import os
    os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")
    import pygame  # type: ignore
    return pygame


class Status(Enum):
    PLAYING = "playing"
    WIN = "win"
    LOSS = "loss"


class GameState:
    """Occupancy grid, snake body (head first), goal and turn counter.

    This is everything an agent may look at. Agents treat it as read-only;
    hypothetical states are built on ``copy()``.
    """

    def __init__(
        self,
        occupied: Grid[bool],
        snake: Deque[Coord],
        apple: Coord,
        turn: int = 0,
        status: Status = Status.PLAYING,
    ) -> None:
        self.occupied = occupied
        self.snake = snake
        self.apple = apple
        self.turn = turn
        self.status = status

    def copy(self) -> "GameState":
        # The copy is unbounded: lookahead may extend the body past the board size.
        return GameState(self.occupied.copy(), deque(self.snake), self.apple, self.turn, self.status)

    @property
    def width(self) -> int:
        return self.occupied.w

    @property
    def height(self) -> int:
        return self.occupied.h

    @property
    def dimensions(self) -> Tuple[int, int]:
        return self.occupied.dimensions

    @property
    def head(self) -> Coord:
        return self.snake[0]

    @property
    def tail(self) -> Coord:
        return self.snake[-1]

    @property
    def board_size(self) -> int:
        return self.occupied.size

    @property
    def done(self) -> bool:
        return self.status is not Status.PLAYING

    @property
    def won(self) -> bool:
        return self.status is Status.WIN

    @property
    def lost(self) -> bool:
        return self.status is Status.LOSS


def validate_body(width: int, height: int, body: Iterable[Coord]) -> List[Coord]:
    """Check a head-first body: non-empty, on the board, distinct, contiguous."""
    cells = [tuple(c) for c in body]
    if not cells:
        raise ValueError("Snake body must contain at least one coordinate")
    if len(cells) > width * height:
        raise ValueError("Snake body is longer than the board")
    for c in cells:
        if not (0 <= c[0] < width and 0 <= c[1] < height):
            raise ValueError(f"Snake body coordinate {c} is outside the {width}x{height} board")
    if len(set(cells)) != len(cells):
        raise ValueError("Snake body overlaps itself")
    for a, b in zip(cells, cells[1:]):
        if not is_neighbor(a, b):
            raise ValueError(f"Snake body is not contiguous between {a} and {b}")
    return cells


class SnakeGame(GameState):
    """Game state manager.

    Rules: the snake moves one step per turn, dies on leaving the board or
    entering any occupied cell (including the current tail), grows by one on
    eating the apple and wins once it fills the board.
    """

    def __init__(
        self,
        width: Optional[int] = None,
        height: Optional[int] = None,
        rng: Optional[RandomSource] = None,
        *,
        initial_body: Optional[Iterable[Coord]] = None,
        apple: Optional[Coord] = None,
        render_enabled: bool = False,
    ) -> None:
        width = int(config.BOARD_WIDTH if width is None else width)
        height = int(config.BOARD_HEIGHT if height is None else height)
        if width < 2 or height < 2 or width % 2 or height % 2:
            raise ValueError(f"Board dimensions must be even and >= 2 (got {width}x{height})")
        self.rng = rng if rng is not None else RandomSource()

        occupied: Grid[bool] = Grid(width, height, False)
        snake: Deque[Coord] = deque(maxlen=width * height + 1)
        super().__init__(occupied, snake, INVALID)

        if initial_body is None:
            start = (self.rng.randrange(width), self.rng.randrange(height))
            body = [start]
        else:
            body = validate_body(width, height, initial_body)
        for c in body:
            self.snake.append(c)
            self.occupied[c] = True

        self.terminal_reason: Optional[str] = None
        self.collision_reason: Optional[str] = None

        if apple is not None:
            if not self.occupied.is_clear(apple):
                raise ValueError(f"Apple {apple} must be a free cell on the board")
            self.apple = tuple(apple)
        elif len(self.snake) == self.board_size:
            self._finish(Status.WIN, "win")
        else:
            self.apple = self.random_free_coord()

        self.render_enabled = bool(render_enabled)
        self.pygame = None
        self.screen = None
        self.clock = None
        self.font = None
        if self.render_enabled:
            self._init_display()

    def random_free_coord(self) -> Coord:
        free = self.board_size - len(self.snake)
        if free <= 0:
            raise RuntimeError("No free coordinate left on the board")
        pos = self.rng.randrange(free)
        for c in self.occupied.coords():
            if not self.occupied[c]:
                if pos == 0:
                    return c
                pos -= 1
        raise RuntimeError("Occupancy grid does not match the snake length")

    def _finish(self, status: Status, reason: str) -> None:
        self.status = status
        self.terminal_reason = reason

    def move(self, d: Dir) -> bool:
        """Apply one move. Returns True when the apple was eaten."""
        if self.done:
            return False
        self.turn += 1
        nxt = step(self.head, d)
        if not self.occupied.valid(nxt):
            self.collision_reason = "wall"
            self._finish(Status.LOSS, "collision")
            return False
        if self.occupied[nxt]:
            self.collision_reason = "self"
            self._finish(Status.LOSS, "collision")
            return False

        self.snake.appendleft(nxt)
        self.occupied[nxt] = True
        if nxt == self.apple:
            if len(self.snake) == self.board_size:
                logger.info("Board filled after %d turns - snake wins", self.turn)
                self._finish(Status.WIN, "win")
            else:
                self.apple = self.random_free_coord()
            return True

        self.occupied[self.snake.pop()] = False
        return False

    def stop(self, reason: str = "turn_limit") -> None:
        """End a running game as a loss (used for the per-game turn cap)."""
        if not self.done:
            self._finish(Status.LOSS, reason)

    # ----------------------------
    # Rendering
    # ----------------------------
    def _init_display(self) -> None:
        self.pygame = _import_pygame()
        self.pygame.init()
        size = (self.width * config.CELL_PIXELS, self.height * config.CELL_PIXELS)
        self.screen = self.pygame.display.set_mode(size)
        self.pygame.display.set_caption("hamsnake")
        self.clock = self.pygame.time.Clock()
        self.font = self.pygame.font.SysFont("Arial", 16, bold=True)

    def _rect(self, c: Coord, inset: int = 0):
        px = config.CELL_PIXELS
        return self.pygame.Rect(c[0] * px + inset, c[1] * px + inset, px - 2 * inset, px - 2 * inset)

    def _center(self, c: Coord) -> Tuple[int, int]:
        px = config.CELL_PIXELS
        return (c[0] * px + px // 2, c[1] * px + px // 2)

    def handle_pygame_events(self) -> None:
        if not self.render_enabled or self.pygame is None:
            return
        for event in self.pygame.event.get():
            if event.type == self.pygame.QUIT:
                raise KeyboardInterrupt

    def render(self, debug_info: Optional[Dict[str, Any]] = None) -> None:
        """Draw the board; ``debug_info`` may carry ``plan`` and ``cycle`` coordinate lists."""
        if not self.render_enabled or self.screen is None or self.pygame is None:
            return

        pg = self.pygame
        px = config.CELL_PIXELS
        self.screen.fill((20, 20, 30))

        for x in range(self.width + 1):
            width = 2 if x % 2 == 0 else 1
            pg.draw.line(self.screen, (50, 50, 64), (x * px, 0), (x * px, self.height * px), width)
        for y in range(self.height + 1):
            width = 2 if y % 2 == 0 else 1
            pg.draw.line(self.screen, (50, 50, 64), (0, y * px), (self.width * px, y * px), width)

        if config.UI_DEBUG_MODE and debug_info:
            cycle = debug_info.get("cycle")
            if cycle and len(cycle) > 1:
                points = [self._center(c) for c in cycle] + [self._center(cycle[0])]
                pg.draw.lines(self.screen, (60, 60, 110), False, points, 1)
            plan = debug_info.get("plan")
            if plan:
                for c in plan:
                    pg.draw.rect(self.screen, (50, 80, 120), self._rect(c, 4), border_radius=3)

        if self.occupied.valid(self.apple):
            pg.draw.circle(self.screen, (230, 30, 30), self._center(self.apple), int(px * 0.4))

        if len(self.snake) > 1:
            points = [self._center(c) for c in self.snake]
            pg.draw.lines(self.screen, (0, 170, 0), False, points, max(2, int(px * 0.4)))
        pg.draw.circle(self.screen, (0, 220, 120), self._center(self.head), int(px * 0.4))

        if self.font:
            label = f"turn {self.turn}  size {len(self.snake)}"
            if self.done:
                label += f"  {self.status.value.upper()}"
            self.screen.blit(self.font.render(label, True, (255, 255, 255)), (6, 4))

        pg.display.flip()
        if self.clock:
            self.clock.tick(config.FPS)
