"""Configuration constants for zksync-deploy library."""

# Artifact format tag written by hardhat-zksync-solc; anything else was not built by zksolc
ARTIFACT_FORMAT_VERSION = "hh-zksolc-artifact-1"
REQUIRED_COMPILER = "zksolc"

# Directory hardhat-zksync-solc writes artifacts to
DEFAULT_ARTIFACTS_DIR_NAME = "artifacts-zk"

# Named L1 networks resolved to a well-known endpoint instead of a raw RPC URL.
# The endpoint can be overridden through the network's environment variable.
SUPPORTED_L1_NETWORKS = {
    "mainnet": {
        "chain_id": 1,
        "default_rpc_url": "https://cloudflare-eth.com",
        "default_rpc_env": "MAINNET_RPC_URL",
    },
    "ropsten": {
        "chain_id": 3,
        "default_rpc_url": "https://rpc.ankr.com/eth_ropsten",
        "default_rpc_env": "ROPSTEN_RPC_URL",
    },
    "rinkeby": {
        "chain_id": 4,
        "default_rpc_url": "https://rpc.ankr.com/eth_rinkeby",
        "default_rpc_env": "RINKEBY_RPC_URL",
    },
    "goerli": {
        "chain_id": 5,
        "default_rpc_url": "https://rpc.ankr.com/eth_goerli",
        "default_rpc_env": "GOERLI_RPC_URL",
    },
    "kovan": {
        "chain_id": 42,
        "default_rpc_url": "https://kovan.poa.network",
        "default_rpc_env": "KOVAN_RPC_URL",
    },
    "sepolia": {
        "chain_id": 11155111,
        "default_rpc_url": "https://rpc.sepolia.org",
        "default_rpc_env": "SEPOLIA_RPC_URL",
    },
}

# Native currency pseudo-address used as the default fee token
ETH_ADDRESS = "0x0000000000000000000000000000000000000000"

# System contract that performs CREATE on behalf of deploy transactions
CONTRACT_DEPLOYER_ADDRESS = "0x0000000000000000000000000000000000008006"

# ContractDeployed(address indexed deployerAddress, bytes32 indexed bytecodeHash, address indexed contractAddress)
CONTRACT_DEPLOYED_EVENT = "ContractDeployed(address,bytes32,address)"

# create(bytes32 salt, bytes32 bytecodeHash, bytes input)
CREATE_SELECTOR = "0x9c4d535b"

EIP712_TX_TYPE = 0x71
DEFAULT_GAS_PER_PUBDATA_LIMIT = 50000

# zkSync bytecode must fit in 2**16 words of 32 bytes
MAX_BYTECODE_WORDS = 2**16

# Receipt polling defaults
DEFAULT_CONFIRMATION_TIMEOUT = 120.0
DEFAULT_POLL_INTERVAL = 1.0
DEFAULT_RPC_TIMEOUT = 30
