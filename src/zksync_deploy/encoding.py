"""ABI and bytecode encoding helpers for zkSync deployments."""

import hashlib
from typing import Any, Dict, List, Optional, Sequence, Union

from eth_abi import decode, encode, is_encodable
from eth_abi.exceptions import DecodingError, EncodingError
from eth_utils import keccak, to_bytes

from .constants import CREATE_SELECTOR, MAX_BYTECODE_WORDS
from .exceptions import ConstructorArgumentsError, ContractCallError, InvalidBytecodeError

ZERO_SALT = b"\x00" * 32


def _abi_type(param: Dict[str, Any]) -> str:
    """Collapse an ABI parameter into its canonical type string, expanding tuples."""
    abi_type = param["type"]
    if not abi_type.startswith("tuple"):
        return abi_type
    components = ",".join(_abi_type(c) for c in param.get("components", []))
    return f"({components}){abi_type[len('tuple'):]}"


def constructor_input_types(abi: List[Dict[str, Any]]) -> List[str]:
    """
    Get the canonical input types of a contract constructor.

    Args:
        abi: Contract ABI

    Returns:
        List of ABI type strings, empty for an implicit constructor
    """
    for item in abi:
        if item.get("type") == "constructor":
            return [_abi_type(param) for param in item.get("inputs", [])]
    return []


def encode_constructor_arguments(abi: List[Dict[str, Any]], args: Sequence[Any]) -> bytes:
    """
    Encode constructor arguments against the contract ABI.

    Arguments are validated before encoding so that a mismatch is
    reported without touching the network.

    Args:
        abi: Contract ABI
        args: Positional constructor arguments

    Returns:
        ABI-encoded arguments (empty bytes when the constructor takes none)

    Raises:
        ConstructorArgumentsError: On wrong argument count or a value that
                                   cannot be encoded as its declared type
    """
    types = constructor_input_types(abi)
    args = _check_arguments(types, args, "Constructor", ConstructorArgumentsError)

    if not types:
        return b""

    try:
        return encode(types, args)
    except EncodingError as e:
        raise ConstructorArgumentsError(f"Failed to encode constructor arguments: {e}") from e


def _check_arguments(types: List[str], args: Sequence[Any], subject: str, error: type) -> List[Any]:
    args = list(args)

    if len(args) != len(types):
        raise error(f"{subject} expects {len(types)} argument(s) ({', '.join(types)}), got {len(args)}")

    for position, (abi_type, value) in enumerate(zip(types, args)):
        if not is_encodable(abi_type, value):
            raise error(f"{subject} argument {position} is not a valid {abi_type}: {value!r}")

    return args


def encode_function_call(function_abi: Dict[str, Any], args: Sequence[Any]) -> str:
    """
    Build calldata for a contract function: 4-byte selector then arguments.

    Args:
        function_abi: ABI entry of the function
        args: Positional function arguments

    Returns:
        0x-prefixed calldata

    Raises:
        ContractCallError: On wrong argument count or an unencodable value
    """
    name = function_abi["name"]
    types = [_abi_type(param) for param in function_abi.get("inputs", [])]
    args = _check_arguments(types, args, f"Function {name}", ContractCallError)

    selector = keccak(text=f"{name}({','.join(types)})")[:4]
    try:
        return "0x" + (selector + encode(types, args)).hex()
    except EncodingError as e:
        raise ContractCallError(f"Failed to encode arguments of {name}: {e}") from e


def decode_function_result(function_abi: Dict[str, Any], data: str) -> Any:
    """
    Decode the return data of a contract function.

    Returns:
        None for a function without outputs, the bare value for a single
        output, otherwise a tuple of values

    Raises:
        ContractCallError: If the data does not match the declared outputs
    """
    types = [_abi_type(param) for param in function_abi.get("outputs", [])]
    if not types:
        return None

    try:
        values = decode(types, to_bytes(hexstr=data))
    except DecodingError as e:
        raise ContractCallError(f"Failed to decode result of {function_abi['name']}: {e}") from e

    return values[0] if len(values) == 1 else tuple(values)


def hash_bytecode(bytecode: Union[str, bytes]) -> bytes:
    """
    Compute the versioned zkSync bytecode hash.

    Layout: version byte 0x01, a zero byte, the length in 32-byte words
    (2 bytes, big endian), then the last 28 bytes of sha256(bytecode).

    Args:
        bytecode: Contract bytecode, hex string or raw bytes

    Returns:
        32-byte bytecode hash

    Raises:
        InvalidBytecodeError: If the bytecode is not a whole, odd number of
                              words or exceeds the maximum size
    """
    raw = to_bytes(hexstr=bytecode) if isinstance(bytecode, str) else bytes(bytecode)

    if len(raw) % 32 != 0:
        raise InvalidBytecodeError("Bytecode length in bytes must be divisible by 32")

    words = len(raw) // 32
    if words >= MAX_BYTECODE_WORDS:
        raise InvalidBytecodeError(f"Bytecode too long: {words} words")
    if words % 2 == 0:
        raise InvalidBytecodeError("Bytecode length in 32-byte words must be odd")

    digest = hashlib.sha256(raw).digest()
    return b"\x01\x00" + words.to_bytes(2, "big") + digest[4:]


def encode_create_calldata(
    bytecode_hash: bytes,
    constructor_calldata: bytes,
    salt: Optional[bytes] = None,
) -> str:
    """
    Build calldata for ContractDeployer.create(bytes32,bytes32,bytes).

    Args:
        bytecode_hash: Versioned hash of the bytecode to deploy
        constructor_calldata: ABI-encoded constructor arguments
        salt: 32-byte salt (unused by CREATE, defaults to zero)

    Returns:
        0x-prefixed calldata
    """
    encoded = encode(
        ["bytes32", "bytes32", "bytes"],
        [salt or ZERO_SALT, bytecode_hash, constructor_calldata],
    )
    return CREATE_SELECTOR + encoded.hex()
