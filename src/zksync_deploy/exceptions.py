"""Custom exception classes for zksync-deploy library."""

from typing import Any, Dict, List, Optional

from .constants import ARTIFACT_FORMAT_VERSION, REQUIRED_COMPILER


class DeployerError(Exception):
    """Base exception for deployer-related errors."""

    pass


class ArtifactNotFoundError(DeployerError, FileNotFoundError):
    """Raised when no compiled artifact matches a contract identifier."""

    pass


class AmbiguousIdentifier(DeployerError, ValueError):
    """Raised when a bare contract name matches more than one compiled contract."""

    def __init__(self, identifier: str, candidates: List[str]):
        self.identifier = identifier
        self.candidates = list(candidates)
        alternatives = "\n".join(f"  * {name}" for name in self.candidates)
        super().__init__(
            f"There are multiple artifacts for contract '{identifier}', "
            f"please use a fully qualified name instead:\n{alternatives}"
        )


class IncompatibleCompiler(DeployerError, ValueError):
    """Raised when an artifact was not produced by zksolc."""

    def __init__(self, identifier: str, found_format: Optional[str] = None):
        self.identifier = identifier
        self.found_format = found_format
        super().__init__(
            f"Artifact {identifier} was not compiled by {REQUIRED_COMPILER} "
            f"(expected format '{ARTIFACT_FORMAT_VERSION}', found '{found_format}'). "
            f"Recompile it with {REQUIRED_COMPILER}."
        )


class DependencyResolutionFailure(DeployerError):
    """Raised when a declared factory dependency cannot be loaded."""

    def __init__(self, identifier: str, dependency: str, reason: str = ""):
        self.identifier = identifier
        self.dependency = dependency
        message = f"Failed to resolve factory dependency '{dependency}' of {identifier}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class EstimationFailure(DeployerError):
    """Raised when gas or gas price cannot be queried for a deploy transaction."""

    def __init__(self, identifier: str, reason: str = ""):
        self.identifier = identifier
        message = f"Failed to estimate deploy fee for {identifier}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class DeploymentFailure(DeployerError):
    """Raised when a deploy transaction fails to broadcast, confirm, or reverts."""

    def __init__(
        self,
        identifier: str,
        reason: str = "",
        receipt: Optional[Dict[str, Any]] = None,
    ):
        self.identifier = identifier
        self.receipt = receipt
        message = f"Failed to deploy {identifier}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class RpcError(DeployerError, RuntimeError):
    """Raised when a JSON-RPC request fails at the transport or protocol level."""

    def __init__(self, message: str, method: Optional[str] = None, code: Optional[int] = None):
        self.method = method
        self.code = code
        super().__init__(message)


class TransactionTimeoutError(RpcError, TimeoutError):
    """Raised when a transaction receipt does not appear in time."""

    pass


class ConstructorArgumentsError(DeployerError, ValueError):
    """Raised when constructor arguments do not match the artifact ABI."""

    pass


class ContractCallError(DeployerError, ValueError):
    """Raised when a contract function call cannot be encoded or its result decoded."""

    pass


class InvalidBytecodeError(DeployerError, ValueError):
    """Raised when bytecode cannot be hashed for zkSync deployment."""

    pass


class InvalidArtifactError(DeployerError, ValueError):
    """Raised when an artifact file cannot be decoded or lies outside the artifacts directory."""

    pass


class ConfigurationError(DeployerError, ValueError):
    """Raised when network configuration is missing or malformed."""

    pass
