"""
ERC-20 / EIP-712 Metadata ABI Module

Minimal ABI fragments for the read-only calls the client makes against a
token contract: the EIP-712 domain ``name()`` and ``version()``.

Usage:
    from ERC20_ABI import get_metadata_abi

    contract = w3.eth.contract(address=token_address, abi=get_metadata_abi())
    name = await contract.functions.name().call()
"""

from typing import Dict, Any, List


def get_name_abi() -> List[Dict[str, Any]]:
    """
    Get ABI for ERC-20 `name()`.

    Returns:
        List[Dict[str, Any]]: ABI for the name function
    """
    return [
        {
            "name": "name",
            "type": "function",
            "stateMutability": "view",
            "inputs": [],
            "outputs": [{"name": "", "type": "string"}],
        }
    ]


def get_version_abi() -> List[Dict[str, Any]]:
    """
    Get ABI for the EIP-712 `version()` getter.

    `version()` is not part of ERC-20; USDC and other EIP-3009 tokens
    expose it because it feeds their domain separator.

    Returns:
        List[Dict[str, Any]]: ABI for the version function
    """
    return [
        {
            "name": "version",
            "type": "function",
            "stateMutability": "view",
            "inputs": [],
            "outputs": [{"name": "", "type": "string"}],
        }
    ]


def get_metadata_abi() -> List[Dict[str, Any]]:
    """
    Get combined ABI for `name()` and `version()`.

    Returns:
        List[Dict[str, Any]]: ABI containing both getters
    """
    return get_name_abi() + get_version_abi()
