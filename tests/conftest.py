"""
Shared fixtures: an in-memory chain that deploys the in-process PriceFeed
facade and answers eth_call the way a node does (custom-error reverts).
"""

from types import SimpleNamespace
from typing import Callable, Dict, Optional
from unittest.mock import MagicMock

import pytest
from eth_abi import encode
from hexbytes import HexBytes
from web3 import Web3
from web3.exceptions import ContractCustomError

from redstone_demo.contracts import (
    CalldataMustHaveValidPayload,
    MarkerPayloadVerifier,
    PayloadVerifier,
    PriceFeed,
    PRICE_FEED_ABI,
)
from redstone_demo.data.config import ConfigManager
from redstone_demo.deploy import ContractArtifact

DEPLOYER = "0x90F8bf6A479f320ead074411a4B0e7944Ea8c9C1"


class FakeEth:
    chain_id = 31
    gas_price = 60_000_000

    def __init__(self, verifier_factory: Callable[[], PayloadVerifier]):
        self.verifier_factory = verifier_factory
        self.contracts: Dict[str, PriceFeed] = {}
        self.receipts: Dict[bytes, dict] = {}
        self.nonces: Dict[str, int] = {}
        self.block_number = 0
        self.calls = []

    def get_transaction_count(self, address):
        return self.nonces.get(address, 0)

    def contract(self, abi=None, bytecode=None, address=None):
        factory = MagicMock()
        factory.constructor.return_value.build_transaction.side_effect = (
            lambda tx: {**tx, "data": bytecode, "gas": 500_000, "value": 0}
        )
        return factory

    def send_raw_transaction(self, raw):
        nonce = self.nonces.get(DEPLOYER, 0)
        self.nonces[DEPLOYER] = nonce + 1
        tx_hash = bytes(Web3.keccak(bytes(raw) + nonce.to_bytes(8, "big")))
        created = bytes(Web3.keccak(bytes.fromhex(DEPLOYER[2:]) + bytes([nonce])))[12:]
        address = Web3.to_checksum_address("0x" + created.hex())
        self.contracts[address] = PriceFeed(self.verifier_factory())
        self.block_number += 1
        self.receipts[tx_hash] = {"status": 1, "contractAddress": address, "blockNumber": self.block_number}
        return HexBytes(tx_hash)

    def wait_for_transaction_receipt(self, tx_hash, timeout=120):
        return self.receipts[bytes(tx_hash)]

    def call(self, tx):
        self.calls.append(tx)
        contract = self.contracts[tx["to"]]
        data = bytes.fromhex(tx["data"][2:])
        try:
            value = contract.call(data)
        except CalldataMustHaveValidPayload:
            revert = "0x" + CalldataMustHaveValidPayload.SELECTOR.hex()
            raise ContractCustomError(revert, data=revert)
        return HexBytes(encode(["uint256"], [value]))


@pytest.fixture
def verifier_factory():
    return MarkerPayloadVerifier


@pytest.fixture
def chain(verifier_factory):
    return SimpleNamespace(eth=FakeEth(verifier_factory))


@pytest.fixture
def deployer():
    account = MagicMock()
    account.address = DEPLOYER
    account.sign_transaction.side_effect = lambda tx: SimpleNamespace(
        raw_transaction=HexBytes(repr(sorted(tx.items())).encode())
    )
    return account


@pytest.fixture
def artifact():
    return ContractArtifact(contractName="PriceFeed", abi=PRICE_FEED_ABI, bytecode="0x6080604052")


@pytest.fixture(autouse=True)
def fresh_config(monkeypatch):
    for var in ("RSK_RPC_URL", "CONTRACT_ADDRESS", "REDSTONE_API_URL", "PRICE_FEED_ARTIFACT", "PRIVATE_KEY"):
        monkeypatch.delenv(var, raising=False)
    ConfigManager.reset()
    yield
    ConfigManager.reset()
