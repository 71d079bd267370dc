"""Path management utilities for zksync-deploy library."""

from pathlib import Path
from typing import Optional, Union

from .constants import DEFAULT_ARTIFACTS_DIR_NAME


def get_default_artifacts_dir() -> Path:
    """
    Get default artifacts directory (current project).

    Returns:
        Path to ./artifacts-zk
    """
    return Path.cwd() / DEFAULT_ARTIFACTS_DIR_NAME


def resolve_artifacts_dir(artifacts_dir: Optional[Union[Path, str]] = None) -> Path:
    """
    Resolve the artifacts directory to an absolute path.

    Args:
        artifacts_dir: Custom artifacts directory (defaults to ./artifacts-zk)

    Returns:
        Absolute path to the artifacts directory
    """
    if artifacts_dir is None:
        return get_default_artifacts_dir()
    return Path(artifacts_dir).absolute()


def get_artifact_path(artifacts_dir: Path, source_name: str, contract_name: str) -> Path:
    """
    Get the location of an artifact file.

    Args:
        artifacts_dir: Root artifacts directory
        source_name: Source file, e.g. "contracts/Token.sol"
        contract_name: Contract name, e.g. "Token"

    Returns:
        Path to {artifacts_dir}/{source_name}/{contract_name}.json
    """
    return artifacts_dir / source_name / f"{contract_name}.json"
