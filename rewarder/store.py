import os
from typing import Optional

from tinydb import TinyDB, where
from tinydb.storages import MemoryStorage

from rewarder.models import Bytes32, TreeSnapshot


class SnapshotStore(TinyDB):
    """
    Append-only history of generated trees.
    Documents are never updated, the latest tree is the one generated last
    (insertion order breaks ties between trees generated in the same second).
    Pass `path=None` to keep the history in memory.
    """

    TABLE = "trees"

    def __init__(self, path: Optional[str] = None, drop=False, **kwargs):
        if path is None:
            super().__init__(storage=MemoryStorage, **kwargs)
        else:
            create_dirs = self.exists(path) == False
            super().__init__(
                f"{path}/rewarder-db.json",
                indent=4,
                create_dirs=create_dirs,
                **kwargs,
            )

        if drop:
            self.drop_tables()

    @staticmethod
    def exists(path: str):
        return os.path.exists(path)

    @property
    def trees(self):
        return self.table(self.TABLE)

    def insert_snapshot(self, snapshot: TreeSnapshot) -> int:
        doc_id = self.trees.insert(snapshot.model_dump(mode="json"))
        print(
            f"🌳 Stored tree {snapshot.root} with {len(snapshot.leaves)} leaves for epoch {snapshot.generatedAtEpoch}"
        )
        return doc_id

    def _ordered(self) -> list:
        return sorted(self.trees.all(), key=lambda doc: (doc["createdAt"], doc.doc_id))

    def find_all(self) -> list[TreeSnapshot]:
        """Every stored tree, oldest first"""
        return [TreeSnapshot.model_validate(dict(doc)) for doc in self._ordered()]

    def find_latest(self) -> Optional[TreeSnapshot]:
        docs = self._ordered()
        if len(docs) == 0:
            return None
        return TreeSnapshot.model_validate(dict(docs[-1]))

    def find_by_root(self, root: Bytes32) -> Optional[TreeSnapshot]:
        """Most recent tree with the given root"""
        docs = sorted(
            self.trees.search(where("root") == root.lower()),
            key=lambda doc: (doc["createdAt"], doc.doc_id),
        )
        if len(docs) == 0:
            return None
        return TreeSnapshot.model_validate(dict(docs[-1]))
