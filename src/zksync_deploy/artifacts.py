"""Compiled artifact store for zksync-deploy library."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .exceptions import AmbiguousIdentifier, ArtifactNotFoundError, InvalidArtifactError
from .paths import get_artifact_path, resolve_artifacts_dir
from .types import ZkSyncArtifact

log = logging.getLogger(__name__)

BUILD_INFO_DIR = "build-info"


def parse_artifact(data: Dict[str, Any], identifier: str) -> ZkSyncArtifact:
    """
    Parse a hardhat artifact JSON record.

    The format tag is recorded but not checked here; callers decide
    which compiler they accept.

    Args:
        data: Decoded artifact JSON
        identifier: Identifier the artifact was requested by (for error messages)

    Returns:
        ZkSyncArtifact with canonical field names

    Raises:
        KeyError: If contractName, sourceName, abi or bytecode is missing
    """
    try:
        contract_name = data["contractName"]
        source_name = data["sourceName"]
        abi = data["abi"]
        bytecode = data["bytecode"]
    except KeyError as e:
        raise KeyError(f"Artifact {identifier} is missing required field {e}") from e

    return ZkSyncArtifact(
        format=data.get("_format"),
        contract_name=contract_name,
        source_name=source_name,
        abi=abi,
        bytecode=bytecode,
        # json.load keeps object order, so declaration order survives
        factory_deps=dict(data.get("factoryDeps") or {}),
        deployed_bytecode=data.get("deployedBytecode"),
        source_mapping=data.get("sourceMapping"),
        link_references=data.get("linkReferences") or {},
    )


class ArtifactStore:
    """Reads compiled artifacts from a hardhat-style artifacts directory."""

    def __init__(self, artifacts_dir: Optional[Union[Path, str]] = None):
        """
        Initialize the artifact store.

        Args:
            artifacts_dir: Root of the artifacts tree
                           If None, uses ./artifacts-zk
        """
        self.artifacts_dir = resolve_artifacts_dir(artifacts_dir)

    def _artifact_files(self) -> List[Path]:
        if not self.artifacts_dir.exists():
            return []
        return [
            path
            for path in sorted(self.artifacts_dir.rglob("*.json"))
            if BUILD_INFO_DIR not in path.relative_to(self.artifacts_dir).parts
            and not path.name.endswith(".dbg.json")
        ]

    def _fully_qualified_name(self, path: Path) -> str:
        source_name = path.parent.relative_to(self.artifacts_dir).as_posix()
        return f"{source_name}:{path.stem}"

    def fully_qualified_names(self) -> List[str]:
        """
        List every compiled contract in the store.

        Returns:
            Sorted fully qualified names, e.g. ["contracts/Token.sol:Token"]
        """
        return sorted(self._fully_qualified_name(path) for path in self._artifact_files())

    def _resolve_path(self, identifier: str) -> Path:
        # Fully qualified: "contracts/Token.sol:Token"
        if ":" in identifier:
            source_name, contract_name = identifier.rsplit(":", 1)
            path = get_artifact_path(self.artifacts_dir, source_name, contract_name)
            if not path.resolve().is_relative_to(self.artifacts_dir.resolve()):
                raise InvalidArtifactError(
                    f"Contract identifier '{identifier}' points outside {self.artifacts_dir}"
                )
            if not path.exists():
                raise ArtifactNotFoundError(
                    f"Artifact for contract '{identifier}' not found in {self.artifacts_dir}"
                )
            return path

        # Bare name must be unique across the project
        matches = [path for path in self._artifact_files() if path.stem == identifier]
        if not matches:
            raise ArtifactNotFoundError(
                f"Artifact for contract '{identifier}' not found in {self.artifacts_dir}"
            )
        if len(matches) > 1:
            raise AmbiguousIdentifier(
                identifier, sorted(self._fully_qualified_name(path) for path in matches)
            )
        return matches[0]

    def artifact_exists(self, identifier: str) -> bool:
        """
        Check if exactly one artifact matches an identifier.

        Args:
            identifier: Bare or fully qualified contract name

        Returns:
            True if the identifier resolves, False otherwise
        """
        try:
            self._resolve_path(identifier)
        except (ArtifactNotFoundError, AmbiguousIdentifier, InvalidArtifactError):
            return False
        return True

    def read_artifact_data(self, identifier: str) -> Dict[str, Any]:
        """
        Read the raw JSON record of an artifact without interpreting it.

        Args:
            identifier: Bare or fully qualified contract name

        Returns:
            Decoded artifact JSON

        Raises:
            ArtifactNotFoundError: If no artifact matches
            AmbiguousIdentifier: If a bare name matches several artifacts
            InvalidArtifactError: If the file is not a JSON object, or the
                                  identifier points outside the store
        """
        path = self._resolve_path(identifier)
        log.debug("Reading artifact %s from %s", identifier, path)

        try:
            with open(path) as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise InvalidArtifactError(f"Artifact {identifier} at {path} is not valid JSON: {e}") from e

        if not isinstance(data, dict):
            raise InvalidArtifactError(f"Artifact {identifier} at {path} is not a JSON object")

        return data

    def read_artifact(self, identifier: str) -> ZkSyncArtifact:
        """
        Read an artifact by contract name.

        Args:
            identifier: A bare contract name (e.g. "Token") if it is unique in
                        the project, or a fully qualified name
                        (e.g. "contracts/Token.sol:Token") otherwise

        Returns:
            Parsed artifact

        Raises:
            ArtifactNotFoundError: If no artifact matches
            AmbiguousIdentifier: If a bare name matches several artifacts
            InvalidArtifactError: If the file cannot be decoded
        """
        return parse_artifact(self.read_artifact_data(identifier), identifier)
