"""
Client side claim preparation: find the stored tree behind the governing root
and derive the proof for one (recipient, token) leaf.

If a claim comes back with `InvalidProofError`, a new root probably activated in between:
fetch the governing root again and rebuild the claim.
"""
from rewarder.errors import LeafNotFoundError, MissingSnapshotError
from rewarder.merkle import MerkleTree, hash_leaf
from rewarder.models import Bytes32, ClaimRequest, EthereumAddress, TreeSnapshot
from rewarder.store import SnapshotStore


def snapshot_for_root(store: SnapshotStore, root: Bytes32) -> TreeSnapshot:
    """
    The governing root is usually the latest tree, but can lag behind it
    while a newer tree sits in its dispute period, so fall back to the history.
    """
    latest = store.find_latest()
    if latest is not None and latest.root == root.lower():
        return latest

    snapshot = store.find_by_root(root)
    if snapshot is None:
        raise MissingSnapshotError(f"No stored tree with root {root}")
    return snapshot


def build_claim(
    snapshot: TreeSnapshot, recipient: EthereumAddress, token: EthereumAddress
) -> ClaimRequest:
    leaf = snapshot.find_leaf(recipient, token)
    if leaf is None:
        raise LeafNotFoundError(f"{recipient} has no {token} rewards in tree {snapshot.root}")

    tree = MerkleTree.from_hex(snapshot.leafHashes)
    return ClaimRequest(
        recipient=leaf.recipient,
        rewardToken=leaf.rewardToken,
        cumulativeAmount=leaf.cumulativeAmount,
        proof=tree.get_proof(hash_leaf(leaf)),
        root=snapshot.root,
    )


def prepare_claim(
    store: SnapshotStore,
    governing_root: Bytes32,
    recipient: EthereumAddress,
    token: EthereumAddress,
) -> ClaimRequest:
    return build_claim(snapshot_for_root(store, governing_root), recipient, token)
