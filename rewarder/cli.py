import json

import fire

from rewarder.config import load_conf
from rewarder.proofs import prepare_claim
from rewarder.run import run_tree_update
from rewarder.store import SnapshotStore


def latest(config_path: str) -> None:
    """Print the root and summary of the most recently generated tree"""
    store = SnapshotStore(load_conf(config_path).db_path)
    snapshot = store.find_latest()
    if snapshot is None:
        print("🤷 No trees generated yet")
        return
    print(f"🌳 {snapshot.root} (epoch {snapshot.generatedAtEpoch}, {len(snapshot.leaves)} leaves)")


def history(config_path: str) -> None:
    store = SnapshotStore(load_conf(config_path).db_path)
    for snapshot in store.find_all():
        print(f"{snapshot.createdAt}\t{snapshot.generatedAtEpoch}\t{snapshot.root}")


def proof(config_path: str, root: str, recipient: str, token: str) -> None:
    """Print the claim (leaf + proof) for `recipient` in the tree behind the governing `root`"""
    store = SnapshotStore(load_conf(config_path).db_path)
    claim = prepare_claim(store, root, recipient, token)
    print(json.dumps(claim.model_dump(mode="json"), indent=4))


if __name__ == "__main__":
    fire.Fire(
        {
            "build": run_tree_update,
            "latest": latest,
            "history": history,
            "proof": proof,
        }
    )
