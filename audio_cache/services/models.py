from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class SourceKind(str, Enum):
    BUNDLE = "bundle"
    NETWORK = "network"


class EntryState(str, Enum):
    ABSENT = "absent"
    LOADING = "loading"
    RESIDENT = "resident"


@dataclass(frozen=True)
class AssetSource:
    identifier: str
    kind: SourceKind
    local_path: Path

    @property
    def is_network(self) -> bool:
        return self.kind == SourceKind.NETWORK
