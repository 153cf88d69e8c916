from __future__ import annotations

import json
import os
import shutil
import unittest
import uuid

from hamsnake.batch import play_multiple
from hamsnake.cli import run


class DeterminismTest(unittest.TestCase):
    def _run_turns(self, seed: int, log_path: str, workers: int) -> list[int]:
        rc = run(
            agent_name="cell_tree",
            num_games=3,
            width=6,
            height=6,
            seed=seed,
            max_turns=500,
            workers=workers,
            log_jsonl=log_path,
        )
        self.assertEqual(rc, 0)
        with open(log_path, encoding="utf-8") as fh:
            rows = [json.loads(line) for line in fh]
        return [row["turns"] for row in sorted(rows, key=lambda row: row["episode"])]

    def test_headless_runs_are_deterministic(self):
        tmp_root = os.path.abspath(
            os.path.join(os.getcwd(), f"tmp-determinism-{uuid.uuid4().hex}")
        )
        os.makedirs(tmp_root, exist_ok=True)
        try:
            turns = []
            for run_id, workers in enumerate((1, 3)):
                log_path = os.path.join(tmp_root, f"run{run_id}.jsonl")
                turns.append(self._run_turns(2026, log_path, workers))
            self.assertEqual(len(turns[0]), 3)
            self.assertEqual(turns[0], turns[1])
        finally:
            shutil.rmtree(tmp_root, ignore_errors=True)

    def test_episodes_do_not_depend_on_worker_count(self):
        a = play_multiple("phc", 4, seed=7, workers=1, width=6, height=6, max_turns=2000)
        b = play_multiple("phc", 4, seed=7, workers=4, width=6, height=6, max_turns=2000)
        self.assertEqual(a.turns, b.turns)
        self.assertEqual([row["episode"] for row in b.episodes], [0, 1, 2, 3])


if __name__ == "__main__":
    unittest.main()
