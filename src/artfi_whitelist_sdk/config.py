"""Network and client configuration."""

import os
from dataclasses import dataclass
from typing import Dict, Optional, TypedDict

from dotenv import load_dotenv

from .whitelist.utils import require_address


@dataclass(frozen=True)
class NetworkConfig:
    name: str
    chain_id: int
    rpc_url: str


NETWORKS: Dict[str, NetworkConfig] = {
    "hardhat": NetworkConfig("hardhat", 31337, "http://127.0.0.1:8545"),
    "mumbai": NetworkConfig("mumbai", 80001, "https://rpc.ankr.com/polygon_mumbai"),
    "polygon": NetworkConfig("polygon", 137, "https://polygon-rpc.com"),
}

DEFAULT_NETWORK = "hardhat"
DEFAULT_TIMEOUT = 30.0


class WhitelistClientConfig(TypedDict, total=False):
    """Configuration for the JSON-RPC client."""

    network: str
    """Network name from NETWORKS. Default: "hardhat"."""

    rpc_url: str
    """Override the network's RPC URL."""

    chain_id: int
    """Override the network's chain ID."""

    whitelist_address: str
    """Deployed ArtfiWhitelist contract."""

    timeout: float
    """HTTP timeout in seconds. Default: 30"""


@dataclass
class ResolvedClientConfig:
    """Resolved client configuration with all defaults applied."""

    network: str
    rpc_url: str
    chain_id: int
    whitelist_address: Optional[str]
    timeout: float


def get_network(name: str) -> NetworkConfig:
    """Look up a known network.

    Raises:
        ValueError: If the network is unknown
    """
    try:
        return NETWORKS[name]
    except KeyError:
        raise ValueError(
            f"Unknown network: {name}. Known networks: {', '.join(sorted(NETWORKS))}"
        )


def resolve_config(config: Optional[WhitelistClientConfig] = None) -> ResolvedClientConfig:
    """Apply defaults to a client configuration."""
    config = config or {}
    network = get_network(config.get("network", DEFAULT_NETWORK))

    whitelist_address = config.get("whitelist_address")
    if whitelist_address:
        whitelist_address = require_address(whitelist_address, "whitelist address")

    return ResolvedClientConfig(
        network=network.name,
        rpc_url=config.get("rpc_url", network.rpc_url),
        chain_id=config.get("chain_id", network.chain_id),
        whitelist_address=whitelist_address,
        timeout=config.get("timeout", DEFAULT_TIMEOUT),
    )


def load_config_from_env(dotenv_path: Optional[str] = None) -> WhitelistClientConfig:
    """Build a client configuration from the environment (and ``.env``).

    Reads ``ARTFI_NETWORK``, ``ARTFI_RPC_URL``, ``ARTFI_CHAIN_ID`` and
    ``ARTFI_WHITELIST_ADDRESS``. Variables already set in the process win
    over the ``.env`` file.
    """
    load_dotenv(dotenv_path)

    config: WhitelistClientConfig = {
        "network": os.environ.get("ARTFI_NETWORK", DEFAULT_NETWORK),
    }
    if os.environ.get("ARTFI_RPC_URL"):
        config["rpc_url"] = os.environ["ARTFI_RPC_URL"]
    if os.environ.get("ARTFI_CHAIN_ID"):
        config["chain_id"] = int(os.environ["ARTFI_CHAIN_ID"])
    if os.environ.get("ARTFI_WHITELIST_ADDRESS"):
        config["whitelist_address"] = os.environ["ARTFI_WHITELIST_ADDRESS"]
    return config


def load_private_key_from_env(var: str = "PRIVATE_KEY") -> str:
    """Return the deployer/whitelister key from the environment.

    Raises:
        ValueError: If the variable is not set
    """
    key = os.environ.get(var)
    if not key:
        raise ValueError(f"{var} environment variable not set")
    return key
