"""
PriceFeed deployment - load the compiled artifact, send the creation
transaction, wait for the receipt and report the contract address.
"""

import json
import sys
from pathlib import Path
from typing import Dict, Any, List, Optional

from eth_account import Account
from eth_account.signers.local import LocalAccount
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from web3 import Web3

from redstone_demo.data.config import ConfigManager
from redstone_demo.data.onchain.web3_client import get_w3
from redstone_demo.errors import ArtifactError, DeploymentError


class ContractArtifact(BaseModel):
    """Hardhat/solc compilation output; only the fields deployment needs"""
    model_config = ConfigDict(populate_by_name=True)

    contract_name: str = Field(default="PriceFeed", alias="contractName")
    abi: List[Dict[str, Any]]
    bytecode: str


class DeploymentResult(BaseModel):
    address: str
    tx_hash: str
    block_number: Optional[int] = None


def load_artifact(path: Path) -> ContractArtifact:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Contract artifact not found at {path} (compile contracts/PriceFeed.sol first)")
    try:
        with open(path, "r") as f:
            artifact = ContractArtifact.model_validate(json.load(f))
    except (json.JSONDecodeError, ValidationError) as e:
        raise ArtifactError(f"Malformed contract artifact {path}: {e}") from e
    if artifact.bytecode in ("", "0x"):
        raise ArtifactError(f"Artifact {path} has no bytecode (abstract contract or interface?)")
    logger.debug(f"Loaded artifact {artifact.contract_name} from {path}")
    return artifact


def deploy_contract(w3: Web3, artifact: ContractArtifact, account: LocalAccount, timeout: int = 120) -> DeploymentResult:
    """Build the factory, send a signed creation transaction and block until it is mined"""
    factory = w3.eth.contract(abi=artifact.abi, bytecode=artifact.bytecode)
    tx = factory.constructor().build_transaction({
        "from": account.address,
        "nonce": w3.eth.get_transaction_count(account.address),
        "chainId": w3.eth.chain_id,
        # RSK has no EIP-1559 fee market
        "gasPrice": w3.eth.gas_price,
    })
    signed = account.sign_transaction(tx)
    tx_hash = w3.eth.send_raw_transaction(signed.raw_transaction)
    tx_hex = Web3.to_hex(tx_hash)
    logger.info(f"Creation transaction {tx_hex} sent, waiting for receipt")

    receipt = w3.eth.wait_for_transaction_receipt(tx_hash, timeout=timeout)
    if receipt.get("status") == 0:
        raise DeploymentError(f"Deployment transaction {tx_hex} reverted", tx_hash=tx_hex)
    address = receipt.get("contractAddress")
    if not address:
        raise DeploymentError(f"Receipt for {tx_hex} has no contract address", tx_hash=tx_hex)

    return DeploymentResult(
        address=Web3.to_checksum_address(address),
        tx_hash=tx_hex,
        block_number=receipt.get("blockNumber"),
    )


def run_deployment(config: Optional[ConfigManager] = None) -> DeploymentResult:
    config = config or ConfigManager()
    w3 = get_w3(config.rpc_url)
    account = Account.from_key(config.get_private_key())
    artifact = load_artifact(config.artifact_path)
    logger.info(f"Deploying {artifact.contract_name} contract from {account.address}...")
    return deploy_contract(
        w3, artifact, account,
        timeout=int(config.get("deployment.receipt_timeout_seconds", 120)),
    )


def main() -> int:
    try:
        result = run_deployment()
    except Exception as e:
        logger.exception(f"Deployment failed: {e}")
        return 1
    print(f"PriceFeed deployed to: {result.address}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
