from __future__ import annotations

import argparse
from pathlib import Path

import pandas as pd


def load(paths: list[Path]) -> pd.DataFrame:
    frames = []
    for path in paths:
        if not path.exists():
            print(f"warning: {path} not found")
            continue
        df = pd.read_json(path, lines=True)
        df["source"] = path.name
        frames.append(df)
    if not frames:
        return pd.DataFrame()
    return pd.concat(frames, ignore_index=True)


def describe(df: pd.DataFrame) -> None:
    if df.empty:
        print("no runs to compare")
        return
    for agent, group in df.groupby("agent"):
        print(f"\n--- {agent} ({', '.join(sorted(group['source'].unique()))}) ---")
        print(group[["turns", "length"]].describe())
        losses = group[~group["won"]]
        print(f"loss rate: {100.0 * len(losses) / len(group):.2f}% ({len(losses)} / {len(group)} games)")
        if not losses.empty:
            print(losses["terminal_reason"].value_counts().to_string())


def main() -> None:
    parser = argparse.ArgumentParser(description="Compare JSONL result files per agent")
    parser.add_argument(
        "runs",
        type=Path,
        nargs="+",
        help="JSONL files written with --log-jsonl",
    )
    args = parser.parse_args()

    describe(load(args.runs))


if __name__ == "__main__":
    main()
