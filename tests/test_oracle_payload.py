import pytest

from redstone_demo.contracts import (
    ACCESSORS,
    PRICE_FEED_ABI,
    REDSTONE_MARKER,
    CalldataMustHaveValidPayload,
    MarkerPayloadVerifier,
    PayloadVerificationUnavailable,
    PriceFeed,
    UnknownSelector,
    append_payload,
    data_feed_id,
    selector,
)


class TestDataFeedId:

    def test_right_padded_bytes32(self):
        feed_id = data_feed_id("ETH")
        assert len(feed_id) == 32
        assert feed_id == b"ETH" + b"\x00" * 29

    def test_rejects_long_symbols(self):
        with pytest.raises(ValueError):
            data_feed_id("X" * 33)


class TestMarkerPayloadVerifier:

    def test_missing_payload(self):
        verifier = MarkerPayloadVerifier(decoder=lambda f, p: 1)
        with pytest.raises(CalldataMustHaveValidPayload):
            verifier.extract_numeric_value(data_feed_id("ETH"), selector("getEthPrice"))

    def test_marker_alone_is_not_a_payload(self):
        verifier = MarkerPayloadVerifier(decoder=lambda f, p: 1)
        with pytest.raises(CalldataMustHaveValidPayload):
            verifier.extract_numeric_value(data_feed_id("ETH"), selector("getEthPrice") + REDSTONE_MARKER)

    def test_payload_without_decoder(self):
        verifier = MarkerPayloadVerifier()
        calldata = append_payload(selector("getEthPrice"), b"\x00" * 32 + REDSTONE_MARKER)
        with pytest.raises(PayloadVerificationUnavailable):
            verifier.extract_numeric_value(data_feed_id("ETH"), calldata)

    def test_decoder_receives_payload_only(self):
        seen = {}

        def decoder(feed_id, payload):
            seen["feed_id"], seen["payload"] = feed_id, payload
            return 42

        payload = b"\xaa" * 16 + REDSTONE_MARKER
        verifier = MarkerPayloadVerifier(decoder=decoder)

        assert verifier.extract_numeric_value(data_feed_id("RIF"), selector("getRifPrice") + payload) == 42
        assert seen == {"feed_id": data_feed_id("RIF"), "payload": payload}


class TestPriceFeedFacade:

    def test_abi_lists_four_view_accessors(self):
        functions = [e for e in PRICE_FEED_ABI if e["type"] == "function"]
        assert [f["name"] for f in functions] == list(ACCESSORS)
        assert all(f["stateMutability"] == "view" and f["inputs"] == [] for f in functions)
        assert all(f["outputs"][0]["type"] == "uint256" for f in functions)

    def test_error_selector(self):
        assert CalldataMustHaveValidPayload.SELECTOR == selector("CalldataMustHaveValidPayload")
        assert len(CalldataMustHaveValidPayload.SELECTOR) == 4

    @pytest.mark.parametrize("accessor", list(ACCESSORS))
    def test_direct_calls_without_payload(self, accessor):
        with pytest.raises(CalldataMustHaveValidPayload):
            getattr(PriceFeed(), accessor)()

    def test_dispatch_by_selector(self):
        feed = PriceFeed(MarkerPayloadVerifier(decoder=lambda f, p: len(f.rstrip(b"\x00"))))
        payload = b"\x01" * 4 + REDSTONE_MARKER

        assert feed.call(selector("getRbtcPrice") + payload) == 4
        assert feed.call(selector("getBtcPrice") + payload) == 3

    def test_unknown_selector(self):
        with pytest.raises(UnknownSelector):
            PriceFeed().call(b"\xde\xad\xbe\xef")
