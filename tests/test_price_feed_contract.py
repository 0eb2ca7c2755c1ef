"""
PriceFeed deployment and accessor wiring against the in-memory chain
"""

import pytest
from web3 import Web3

from redstone_demo.contracts import REDSTONE_MARKER, CalldataMustHaveValidPayload, MarkerPayloadVerifier
from redstone_demo.data.models import ContractAddress
from redstone_demo.data.onchain.web3_client import PriceFeedContract
from redstone_demo.deploy import deploy_contract

ACCESSOR_METHODS = ["get_eth_price", "get_btc_price", "get_rbtc_price", "get_rif_price"]


@pytest.fixture
def price_feed(chain, artifact, deployer):
    """Fresh deployment per test"""
    result = deploy_contract(chain, artifact, deployer)
    return PriceFeedContract(chain, ContractAddress.parse(result.address))


class TestDeployment:
    """Deployment"""

    def test_deploys_to_valid_address(self, chain, artifact, deployer):
        result = deploy_contract(chain, artifact, deployer)

        assert Web3.is_checksum_address(result.address)
        assert result.tx_hash.startswith("0x")
        assert result.block_number == 1

    def test_each_deployment_gets_a_new_address(self, chain, artifact, deployer):
        first = deploy_contract(chain, artifact, deployer)
        second = deploy_contract(chain, artifact, deployer)

        assert first.address != second.address

    def test_has_the_four_accessors(self, price_feed):
        for name in ACCESSOR_METHODS:
            assert callable(getattr(price_feed, name))


class TestAccessorCalls:
    """Calls without a RedStone payload"""

    @pytest.mark.parametrize("method", ACCESSOR_METHODS)
    def test_accessor_without_payload_fails(self, price_feed, method):
        with pytest.raises(CalldataMustHaveValidPayload) as exc_info:
            getattr(price_feed, method)()

        assert "CalldataMustHaveValidPayload" in str(exc_info.value)

    def test_truncated_payload_fails(self, price_feed):
        with pytest.raises(CalldataMustHaveValidPayload):
            price_feed.get_eth_price(payload=REDSTONE_MARKER[:-1])

    def test_unknown_accessor_rejected_client_side(self, price_feed, chain):
        with pytest.raises(AttributeError):
            price_feed.get_price("getDogePrice")
        assert chain.eth.calls == []


class TestPayloadDelegation:
    """Calls carrying a payload reach the configured verifier"""

    @pytest.fixture
    def verifier_factory(self):
        def decoder(feed_id, payload):
            values = {b"ETH": 312345600000, b"BTC": 6500000000000}
            return values[feed_id.rstrip(b"\x00")]
        return lambda: MarkerPayloadVerifier(decoder=decoder)

    def test_payload_value_is_returned(self, price_feed):
        payload = b"\x01" * 40 + REDSTONE_MARKER

        assert price_feed.get_eth_price(payload=payload) == 312345600000
        assert price_feed.get_btc_price(payload=payload) == 6500000000000

    def test_calldata_is_selector_plus_payload(self, price_feed, chain):
        payload = b"\x02" * 8 + REDSTONE_MARKER
        price_feed.get_eth_price(payload=payload)

        sent = chain.eth.calls[-1]["data"]
        assert sent == "0x" + (bytes(Web3.keccak(text="getEthPrice()")[:4]) + payload).hex()
