"""Wallets able to sign for the zkSync network and its L1."""

import logging
from dataclasses import replace
from typing import Any, Dict, List, Optional

import rlp
from eth_account import Account
from eth_account.messages import encode_typed_data
from eth_account.signers.local import LocalAccount
from eth_utils import to_bytes, to_checksum_address

from .constants import EIP712_TX_TYPE
from .encoding import hash_bytecode
from .exceptions import ConfigurationError
from .providers import JsonRpcProvider, ZkSyncProvider
from .types import DeployTransaction

log = logging.getLogger(__name__)

EIP712_DOMAIN_NAME = "zkSync"
EIP712_DOMAIN_VERSION = "2"

EIP712_TYPES = {
    "EIP712Domain": [
        {"name": "name", "type": "string"},
        {"name": "version", "type": "string"},
        {"name": "chainId", "type": "uint256"},
    ],
    "Transaction": [
        {"name": "txType", "type": "uint256"},
        {"name": "from", "type": "uint256"},
        {"name": "to", "type": "uint256"},
        {"name": "gasLimit", "type": "uint256"},
        {"name": "gasPerPubdataByteLimit", "type": "uint256"},
        {"name": "maxFeePerGas", "type": "uint256"},
        {"name": "maxPriorityFeePerGas", "type": "uint256"},
        {"name": "paymaster", "type": "uint256"},
        {"name": "feeToken", "type": "uint256"},
        {"name": "nonce", "type": "uint256"},
        {"name": "value", "type": "uint256"},
        {"name": "data", "type": "bytes"},
        {"name": "factoryDeps", "type": "bytes32[]"},
        {"name": "paymasterInput", "type": "bytes"},
    ],
}


def eip712_message(transaction: DeployTransaction) -> Dict[str, Any]:
    """
    Build the EIP-712 typed data a zkSync transaction is signed over.

    Args:
        transaction: Fully populated transaction (nonce, chain id, gas set)

    Returns:
        Typed data dictionary accepted by eth_account
    """
    return {
        "types": EIP712_TYPES,
        "primaryType": "Transaction",
        "domain": {
            "name": EIP712_DOMAIN_NAME,
            "version": EIP712_DOMAIN_VERSION,
            "chainId": transaction.chain_id,
        },
        "message": {
            "txType": EIP712_TX_TYPE,
            "from": int(transaction.from_address, 16),
            "to": int(transaction.to, 16),
            "gasLimit": transaction.gas_limit,
            "gasPerPubdataByteLimit": transaction.gas_per_pubdata,
            "maxFeePerGas": transaction.gas_price,
            "maxPriorityFeePerGas": transaction.gas_price,
            "paymaster": 0,
            "feeToken": int(transaction.fee_token, 16),
            "nonce": transaction.nonce,
            "value": transaction.value,
            "data": to_bytes(hexstr=transaction.data),
            "factoryDeps": [hash_bytecode(dep) for dep in transaction.factory_deps],
            "paymasterInput": b"",
        },
    }


def serialize_transaction(transaction: DeployTransaction, signature: bytes) -> str:
    """
    RLP-serialize a signed zkSync EIP-712 transaction.

    The signature travels in the custom-signature slot; the legacy
    v/r/s slots carry the chain id and two empty strings. The fee token
    follows the sender address.

    Returns:
        0x-prefixed raw transaction, type byte 0x71 first
    """
    fields: List[Any] = [
        transaction.nonce,
        transaction.gas_price,  # maxPriorityFeePerGas
        transaction.gas_price,  # maxFeePerGas
        transaction.gas_limit,
        to_bytes(hexstr=transaction.to),
        transaction.value,
        to_bytes(hexstr=transaction.data),
        transaction.chain_id,
        b"",
        b"",
        transaction.chain_id,
        to_bytes(hexstr=transaction.from_address),
        to_bytes(hexstr=transaction.fee_token),
        transaction.gas_per_pubdata,
        [to_bytes(hexstr=dep) for dep in transaction.factory_deps],
        signature,
        [],  # no paymaster
    ]
    return "0x" + (bytes([EIP712_TX_TYPE]) + rlp.encode(fields)).hex()



class EthWallet:
    """L1-only view of a wallet, for flows native to Ethereum such as deposits."""

    def __init__(self, account: LocalAccount, provider: JsonRpcProvider):
        self._account = account
        self.provider = provider

    @property
    def address(self) -> str:
        return self._account.address

    def get_balance(self, block: str = "latest") -> int:
        """Get ETH balance on L1 in wei."""
        return self.provider.get_balance(self.address, block)

    def get_transaction_count(self, block: str = "pending") -> int:
        return self.provider.get_transaction_count(self.address, block)

    def sign_transaction(self, transaction: Dict[str, Any]) -> str:
        """
        Sign a plain Ethereum transaction dictionary.

        Returns:
            0x-prefixed raw transaction
        """
        signed = self._account.sign_transaction(transaction)
        return "0x" + bytes(signed.raw_transaction).hex()

    def send_transaction(self, transaction: Dict[str, Any]) -> str:
        """
        Fill nonce and chain id, sign and broadcast an L1 transaction.

        Returns:
            Transaction hash
        """
        populated = dict(transaction)
        populated.setdefault("from", self.address)
        if "nonce" not in populated:
            populated["nonce"] = self.get_transaction_count()
        if "chainId" not in populated:
            populated["chainId"] = self.provider.chain_id()
        tx_hash = self.provider.send_raw_transaction(self.sign_transaction(populated))
        log.info("Sent L1 transaction %s from %s", tx_hash, self.address)
        return tx_hash


class Wallet:
    """
    A zkSync wallet bound to an L2 provider and, optionally, an L1 provider.

    Binding is immutable: connect() and connect_to_l1() return new wallets.
    """

    def __init__(
        self,
        account: LocalAccount,
        provider: Optional[ZkSyncProvider] = None,
        eth_provider: Optional[JsonRpcProvider] = None,
    ):
        self._account = account
        self._provider = provider
        self._eth_provider = eth_provider

    @classmethod
    def from_private_key(cls, private_key: str) -> "Wallet":
        """Create an unbound wallet from a hex private key."""
        return cls(Account.from_key(private_key))

    def __repr__(self) -> str:
        return f"Wallet({self.address})"

    @property
    def address(self) -> str:
        return self._account.address

    @property
    def private_key(self) -> bytes:
        return bytes(self._account.key)

    @property
    def provider(self) -> ZkSyncProvider:
        if self._provider is None:
            raise ConfigurationError("Wallet is not connected to a zkSync provider")
        return self._provider

    @property
    def eth_provider(self) -> JsonRpcProvider:
        if self._eth_provider is None:
            raise ConfigurationError("Wallet is not connected to an L1 provider")
        return self._eth_provider

    def connect(self, provider: ZkSyncProvider) -> "Wallet":
        return Wallet(self._account, provider, self._eth_provider)

    def connect_to_l1(self, eth_provider: JsonRpcProvider) -> "Wallet":
        return Wallet(self._account, self._provider, eth_provider)

    def eth_wallet(self) -> EthWallet:
        """Get the L1-only view of this wallet."""
        return EthWallet(self._account, self.eth_provider)

    def estimate_gas(self, transaction: DeployTransaction) -> int:
        return self.provider.estimate_gas(transaction.to_rpc_dict())

    def get_gas_price(self) -> int:
        return self.provider.get_gas_price()

    def populate_transaction(self, transaction: DeployTransaction) -> DeployTransaction:
        """
        Fill nonce, chain id, gas price and gas limit from the L2 network.

        Args:
            transaction: Transaction with any of those fields unset

        Returns:
            A populated copy; the input is left untouched
        """
        populated = replace(transaction, from_address=to_checksum_address(transaction.from_address))
        if populated.nonce is None:
            populated.nonce = self.provider.get_transaction_count(self.address, "pending")
        if populated.chain_id is None:
            populated.chain_id = self.provider.chain_id()
        if populated.gas_price is None:
            populated.gas_price = self.provider.get_gas_price()
        if populated.gas_limit is None:
            populated.gas_limit = self.provider.estimate_gas(populated.to_rpc_dict())
        return populated

    def sign_transaction(self, transaction: DeployTransaction) -> str:
        """
        Sign a populated transaction.

        Returns:
            0x-prefixed raw 0x71 transaction
        """
        signable = encode_typed_data(full_message=eip712_message(transaction))
        signed = self._account.sign_message(signable)
        return serialize_transaction(transaction, bytes(signed.signature))

    def send_transaction(self, transaction: DeployTransaction) -> str:
        """
        Populate, sign and broadcast a transaction on L2.

        Returns:
            Transaction hash
        """
        populated = self.populate_transaction(transaction)
        tx_hash = self.provider.send_raw_transaction(self.sign_transaction(populated))
        log.info("Sent L2 transaction %s (nonce %s) from %s", tx_hash, populated.nonce, self.address)
        return tx_hash
