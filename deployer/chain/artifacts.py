"""Compiled contract artifact lookup (hardhat JSON layout)."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from deployer.core.errors import ConfigError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContractArtifact:
    """ABI and creation bytecode of one contract."""

    contract_name: str
    abi: List[Dict[str, Any]]
    bytecode: str


class ArtifactStore:
    """Finds ``<ContractName>.json`` files anywhere under the artifacts directory.

    Hardhat writes ``artifacts/contracts/<path>/<Name>.sol/<Name>.json`` next to
    ``<Name>.dbg.json`` files, which are skipped.
    """

    def __init__(self, artifacts_dir: Path):
        self.artifacts_dir = Path(artifacts_dir)
        self._index: Optional[Dict[str, Path]] = None
        self._cache: Dict[str, ContractArtifact] = {}

    def _build_index(self) -> Dict[str, Path]:
        if self._index is None:
            self._index = {}
            if self.artifacts_dir.is_dir():
                for path in sorted(self.artifacts_dir.rglob("*.json")):
                    if path.name.endswith(".dbg.json") or "build-info" in path.parts:
                        continue
                    self._index.setdefault(path.stem, path)
            logger.debug(f"Indexed {len(self._index)} artifacts under {self.artifacts_dir}")
        return self._index

    def has(self, contract_name: str) -> bool:
        return contract_name in self._build_index()

    def missing(self, contract_names: Iterable[str]) -> List[str]:
        return [name for name in contract_names if not self.has(name)]

    def get(self, contract_name: str) -> ContractArtifact:
        """Load an artifact, raising ConfigError when it is absent or malformed."""
        if contract_name in self._cache:
            return self._cache[contract_name]

        path = self._build_index().get(contract_name)
        if path is None:
            raise ConfigError(f"No artifact for {contract_name} under {self.artifacts_dir}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Artifact {path} is not valid JSON: {e}")

        if "abi" not in data:
            raise ConfigError(f"Artifact {path} has no ABI")

        artifact = ContractArtifact(
            contract_name=contract_name,
            abi=data["abi"],
            bytecode=data.get("bytecode", "0x"),
        )
        self._cache[contract_name] = artifact
        return artifact
