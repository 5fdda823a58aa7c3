import csv
import json
from collections import defaultdict
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from rewarder.models import TreeSnapshot

LEAF_FIELDS = ["recipient", "rewardToken", "cumulativeAmount"]


@dataclass
class Writer:
    """Writes a generated tree to `reports/<epoch>/` as json and csv for review before proposing it"""

    db_path: str
    epoch: int

    @property
    def path(self) -> str:
        return f"{self.db_path}/{self.epoch}"

    @property
    def csv_path(self) -> str:
        return f"{self.path}/csv"

    @property
    def json_path(self) -> str:
        return f"{self.path}/json"

    # create the directory in the reports folder for csv and json if it doesn't exist
    def _create_dir(self) -> None:
        Path(self.path).mkdir(parents=True, exist_ok=True)
        Path(self.csv_path).mkdir(parents=True, exist_ok=True)
        Path(self.json_path).mkdir(parents=True, exist_ok=True)

    @staticmethod
    def write_csv(data: list[dict[str, Any]], path: str, fieldnames: list[str]) -> None:
        with open(path, "w+", newline="") as f:
            writer = csv.DictWriter(
                f, delimiter=",", fieldnames=fieldnames, extrasaction="ignore"
            )
            writer.writeheader()
            writer.writerows(data)

    def to_csv(self, data: list[dict[str, Any]], name: str, fieldnames: list[str]) -> None:
        self._create_dir()
        self.write_csv(data, f"{self.csv_path}/{name}.csv", fieldnames)

    def to_json(self, data: Any, name: str) -> None:
        self._create_dir()
        with open(f"{self.json_path}/{name}.json", "w") as f:
            json.dump(data, f, indent=4)

    @staticmethod
    def summarize(snapshot: TreeSnapshot) -> dict[str, Any]:
        totals: dict[str, int] = defaultdict(int)
        recipients = set()
        for leaf in snapshot.leaves:
            totals[leaf.rewardToken] += leaf.cumulativeAmount
            recipients.add(leaf.recipient)
        return {
            "root": snapshot.root,
            "generatedAtEpoch": snapshot.generatedAtEpoch,
            "createdAt": snapshot.createdAt,
            "recipients": len(recipients),
            # amounts as strings, they routinely overflow js numbers
            "totals": {token: str(total) for token, total in totals.items()},
        }

    def write_snapshot(self, snapshot: TreeSnapshot) -> None:
        leaves = [leaf.model_dump() for leaf in snapshot.leaves]
        self.to_json(snapshot.model_dump(mode="json"), "tree")
        self.to_json(self.summarize(snapshot), "summary")
        self.to_csv(leaves, "leaves", LEAF_FIELDS)
