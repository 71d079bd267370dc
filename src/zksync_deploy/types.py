"""Data types and dataclasses for zksync-deploy library."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from eth_utils import to_bytes

from .constants import (
    CONTRACT_DEPLOYER_ADDRESS,
    DEFAULT_GAS_PER_PUBDATA_LIMIT,
    EIP712_TX_TYPE,
    ETH_ADDRESS,
)
from .encoding import decode_function_result, encode_function_call
from .exceptions import ConfigurationError
from .providers import JsonRpcProvider


@dataclass(frozen=True)
class ZkSyncArtifact:
    """A compiled contract artifact produced by hardhat-zksync-solc."""

    # Required fields
    format: str  # "_format" tag, e.g. "hh-zksolc-artifact-1"
    contract_name: str  # e.g. "Token"
    source_name: str  # e.g. "contracts/Token.sol"
    abi: List[Dict[str, Any]]
    bytecode: str  # 0x-prefixed hex

    # Dependency content hash -> contract identifier, in declaration order
    factory_deps: Dict[str, str] = field(default_factory=dict)

    # Optional fields
    deployed_bytecode: Optional[str] = None
    source_mapping: Optional[str] = None  # bytecode -> zkEVM assembly, tracing only
    link_references: Dict[str, Any] = field(default_factory=dict)

    @property
    def fully_qualified_name(self) -> str:
        """Return the fully qualified name, e.g. "contracts/Token.sol:Token"."""
        return f"{self.source_name}:{self.contract_name}"


@dataclass
class DeployTransaction:
    """An unsigned contract deployment transaction for the zkSync network."""

    from_address: str
    data: str  # ContractDeployer.create calldata
    factory_deps: List[str]  # transmitted deps, including the deployed bytecode itself
    fee_token: str = ETH_ADDRESS
    to: str = CONTRACT_DEPLOYER_ADDRESS
    value: int = 0
    gas_per_pubdata: int = DEFAULT_GAS_PER_PUBDATA_LIMIT

    # Filled in by the wallet before signing
    nonce: Optional[int] = None
    chain_id: Optional[int] = None
    gas_limit: Optional[int] = None
    gas_price: Optional[int] = None

    def to_rpc_dict(self) -> Dict[str, Any]:
        """
        Build the JSON-RPC call object used by eth_estimateGas.

        Returns:
            Call object with the zkSync-specific eip712Meta section
        """
        tx: Dict[str, Any] = {
            "from": self.from_address,
            "to": self.to,
            "data": self.data,
            "value": hex(self.value),
            "type": hex(EIP712_TX_TYPE),
            "eip712Meta": {
                "gasPerPubdata": hex(self.gas_per_pubdata),
                # The node expects each dependency as an array of byte values
                "factoryDeps": [list(to_bytes(hexstr=dep)) for dep in self.factory_deps],
                "feeToken": self.fee_token,
            },
        }
        if self.gas_limit is not None:
            tx["gas"] = hex(self.gas_limit)
        if self.gas_price is not None:
            tx["gasPrice"] = hex(self.gas_price)
        return tx


@dataclass
class ContractHandle:
    """A deployed contract, bound to its address, ABI and the L2 network it lives on."""

    address: str  # Checksummed address
    abi: List[Dict[str, Any]]
    contract_name: str
    transaction_hash: str
    receipt: Dict[str, Any] = field(default_factory=dict)
    provider: Optional[JsonRpcProvider] = field(default=None, repr=False, compare=False)

    @property
    def block_number(self) -> Optional[int]:
        """Block the deployment was confirmed in, if the receipt carries it."""
        block = self.receipt.get("blockNumber")
        if block is None:
            return None
        return int(block, 16) if isinstance(block, str) else block

    def function_abi(self, function_name: str) -> Dict[str, Any]:
        """
        Get the ABI definition of a contract function.

        Args:
            function_name: Name of the function

        Returns:
            Function ABI definition

        Raises:
            KeyError: If the function is not part of the contract ABI
        """
        for item in self.abi:
            if item.get("type") == "function" and item.get("name") == function_name:
                return item
        raise KeyError(f"Function '{function_name}' not found in {self.contract_name} ABI")

    def call(self, function_name: str, *args: Any, block: str = "latest") -> Any:
        """
        Call a contract function without sending a transaction.

        Args:
            function_name: Name of the function
            *args: Positional function arguments
            block: Block tag or number to execute against

        Returns:
            Decoded return value: None, a single value, or a tuple

        Raises:
            KeyError: If the function is not part of the contract ABI
            ContractCallError: If arguments or return data do not match the ABI
            ConfigurationError: If the handle is not connected to a provider
            RpcError: If the eth_call request fails
        """
        if self.provider is None:
            raise ConfigurationError(f"{self.contract_name} at {self.address} is not connected to a provider")

        function = self.function_abi(function_name)
        data = encode_function_call(function, args)
        result = self.provider.call({"to": self.address, "data": data}, block)
        return decode_function_result(function, result)
