"""Name -> agent factory table used by the CLI and the batch runner."""

from __future__ import annotations

from typing import Callable, Dict, List

from .agent import Agent
from .cell_tree_agent import CellTreeAgent, DetourStrategy
from .cycle_agents import CutAgent, FixedCycleAgent, PerturbedHamiltonianCycleAgent, ZigZagAgent
from .dhcr import DynamicHamiltonianCycleAgent
from .hamiltonian import random_hamiltonian_cycle
from .rng import RandomSource

AgentFactory = Callable[[int, int, RandomSource], Agent]

AGENTS: Dict[str, AgentFactory] = {}


def register_agent(name: str) -> Callable[[AgentFactory], AgentFactory]:
    def decorator(factory: AgentFactory) -> AgentFactory:
        if name in AGENTS:
            raise ValueError(f"Agent {name!r} is already registered")
        AGENTS[name] = factory
        return factory

    return decorator


def available_agents() -> List[str]:
    return sorted(AGENTS)


def make_agent(name: str, width: int, height: int, rng: RandomSource) -> Agent:
    """Build a fresh agent for a ``width x height`` board.

    Agents that need a random cycle draw it from ``rng`` here, so the same
    seed always yields the same agent.
    """
    try:
        factory = AGENTS[name]
    except KeyError:
        raise ValueError(
            f"Unknown agent {name!r}; available: {', '.join(available_agents())}"
        ) from None
    return factory(width, height, rng)


# ----------------------------
# Built-in agents
# ----------------------------
@register_agent("cell_tree")
def _cell_tree(width: int, height: int, rng: RandomSource) -> Agent:
    return CellTreeAgent()


@register_agent("cell_tree_any")
def _cell_tree_any(width: int, height: int, rng: RandomSource) -> Agent:
    return CellTreeAgent(detour=DetourStrategy.ANY)


@register_agent("cell_tree_none")
def _cell_tree_none(width: int, height: int, rng: RandomSource) -> Agent:
    return CellTreeAgent(detour=DetourStrategy.NONE)


@register_agent("dhcr")
def _dhcr(width: int, height: int, rng: RandomSource) -> Agent:
    return DynamicHamiltonianCycleAgent(random_hamiltonian_cycle(width, height, rng))


@register_agent("phc")
def _phc(width: int, height: int, rng: RandomSource) -> Agent:
    return PerturbedHamiltonianCycleAgent(random_hamiltonian_cycle(width, height, rng))


@register_agent("fixed_cycle")
def _fixed_cycle(width: int, height: int, rng: RandomSource) -> Agent:
    return FixedCycleAgent(random_hamiltonian_cycle(width, height, rng))


@register_agent("zig_zag")
def _zig_zag(width: int, height: int, rng: RandomSource) -> Agent:
    return ZigZagAgent(width, height)


@register_agent("cut")
def _cut(width: int, height: int, rng: RandomSource) -> Agent:
    return CutAgent()
