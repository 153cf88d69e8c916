import argparse
import subprocess
import sys
from pathlib import Path

import pandas as pd


def run_command(cmd: list[str]) -> None:
    print(f">> {' '.join(cmd)}")
    subprocess.run(cmd, check=True)


def describe_jsonl(path: Path, label: str) -> None:
    if not path.exists():
        print(f"warning: {path} does not exist")
        return
    df = pd.read_json(path, lines=True)
    cols = ["turns", "length", "elapsed"]
    print(f"\n--- {label} ({path.name}) ---")
    print(df[cols].describe())
    print(f"win rate: {100.0 * df['won'].mean():.1f}% over {len(df)} games")


def main() -> None:
    parser = argparse.ArgumentParser(description="Benchmark several agents on the same seeds")
    parser.add_argument(
        "--agents",
        nargs="+",
        default=["cell_tree", "dhcr", "phc"],
        help="Agents to benchmark",
    )
    parser.add_argument("--seed", type=int, default=42, help="Root seed shared by every agent")
    parser.add_argument("--num-games", type=int, default=20, help="Games per agent")
    parser.add_argument("--width", type=int, default=20, help="Board width")
    parser.add_argument("--height", type=int, default=20, help="Board height")
    parser.add_argument("--workers", type=int, default=4, help="Worker threads per run")
    parser.add_argument(
        "--runs-dir",
        type=Path,
        default=Path("runs"),
        help="Where to emit JSONL result files",
    )

    args = parser.parse_args()
    args.runs_dir.mkdir(parents=True, exist_ok=True)

    logs = {}
    for agent in args.agents:
        log_path = args.runs_dir / f"{agent}_{args.width}x{args.height}_seed{args.seed}.jsonl"
        if log_path.exists():
            log_path.unlink()
        run_command(
            [
                sys.executable,
                "-m",
                "hamsnake",
                "--agent",
                agent,
                "--num-games",
                str(args.num_games),
                "--width",
                str(args.width),
                "--height",
                str(args.height),
                "--seed",
                str(args.seed),
                "--workers",
                str(args.workers),
                "--log-jsonl",
                str(log_path),
            ]
        )
        logs[agent] = log_path

    for agent, log_path in logs.items():
        describe_jsonl(log_path, agent)


if __name__ == "__main__":
    main()
