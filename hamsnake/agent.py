"""Agent interface shared by every strategy."""

from __future__ import annotations

from typing import Optional

from .game import GameState
from .geometry import Dir
from .trace import AgentLog


class Agent:
    """Picks one move per turn.

    ``decide`` only reads the state. Whatever an agent carries from one turn
    to the next (a cached plan, a maintained cycle) belongs to that instance
    alone; ``reset`` clears it between episodes.
    """

    name = "agent"

    def decide(self, state: GameState, log: Optional[AgentLog] = None) -> Dir:
        raise NotImplementedError

    def reset(self) -> None:
        pass

    def __call__(self, state: GameState, log: Optional[AgentLog] = None) -> Dir:
        return self.decide(state, log)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
