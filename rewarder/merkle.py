"""
Sorted-pair keccak merkle tree, bit compatible with OpenZeppelin's `MerkleProof.verify`
and merkletreejs with `sortPairs: true`.

Leaves are `keccak256(abi.encode(address recipient, address token, uint256 amount))`.
Each parent is the hash of its two children concatenated smallest first, so a proof verifies
regardless of which side each sibling sat on. A node without a partner is carried up unchanged.
"""
from typing import Sequence

import eth_utils as eth
from eth_abi import encode

from rewarder.errors import LeafNotFoundError
from rewarder.models import Bytes32, MerkleLeaf, ProofPosition, ProofStep

LEAF_TYPES = ["address", "address", "uint256"]
EMPTY_ROOT = bytes(32)


def encode_leaf(leaf: MerkleLeaf) -> bytes:
    return encode(LEAF_TYPES, [leaf.recipient, leaf.rewardToken, leaf.cumulativeAmount])


def hash_leaf(leaf: MerkleLeaf) -> bytes:
    return eth.keccak(encode_leaf(leaf))


def hash_pair(a: bytes, b: bytes) -> bytes:
    return eth.keccak(a + b) if a <= b else eth.keccak(b + a)


class MerkleTree:
    """
    :param `leaf_hashes`: hashed leaves in their final order. The tree does not reorder them,
    callers must sort leaves canonically first if the root is to be order independent.
    """

    def __init__(self, leaf_hashes: Sequence[bytes]):
        self.leaves: list[bytes] = list(leaf_hashes)
        self.layers: list[list[bytes]] = [self.leaves]
        while len(self.layers[-1]) > 1:
            self.layers.append(self._next_layer(self.layers[-1]))

    @staticmethod
    def _next_layer(layer: list[bytes]) -> list[bytes]:
        parents = []
        for i in range(0, len(layer), 2):
            if i + 1 == len(layer):
                parents.append(layer[i])
            else:
                parents.append(hash_pair(layer[i], layer[i + 1]))
        return parents

    @staticmethod
    def from_hex(leaf_hashes: Sequence[Bytes32]) -> "MerkleTree":
        return MerkleTree([eth.decode_hex(h) for h in leaf_hashes])

    @property
    def root(self) -> bytes:
        if not self.leaves:
            return EMPTY_ROOT
        return self.layers[-1][0]

    @property
    def hex_root(self) -> Bytes32:
        return eth.encode_hex(self.root)

    def get_proof(self, leaf_hash: bytes) -> list[ProofStep]:
        """Sibling path from `leaf_hash` up to the root"""
        try:
            index = self.leaves.index(leaf_hash)
        except ValueError:
            raise LeafNotFoundError(eth.encode_hex(leaf_hash))

        proof = []
        for layer in self.layers[:-1]:
            is_right = index % 2 == 1
            sibling_index = index - 1 if is_right else index + 1
            if sibling_index < len(layer):
                proof.append(
                    ProofStep(
                        sibling=eth.encode_hex(layer[sibling_index]),
                        position=ProofPosition.LEFT if is_right else ProofPosition.RIGHT,
                    )
                )
            index //= 2
        return proof


def process_proof(leaf_hash: bytes, proof: Sequence[ProofStep]) -> bytes:
    computed = leaf_hash
    for step in proof:
        computed = hash_pair(computed, eth.decode_hex(step.sibling))
    return computed


def verify_proof(leaf_hash: bytes, proof: Sequence[ProofStep], root: Bytes32) -> bool:
    return process_proof(leaf_hash, proof) == eth.decode_hex(root)
