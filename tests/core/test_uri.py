from __future__ import annotations

from nftmarket.meta.core.uri import normalize_uri


class TestNormalizeUri:
    def test_ipfs_rewritten_to_gateway(self):
        assert normalize_uri("ipfs://QmHash/1.json") == "https://ipfs.io/ipfs/QmHash/1.json"

    def test_custom_gateway_trailing_slash(self):
        uri = normalize_uri("ipfs://QmHash", gateway="https://gw.example/ipfs/")
        assert uri == "https://gw.example/ipfs/QmHash"

    def test_redundant_ipfs_segment_collapsed(self):
        assert normalize_uri("ipfs://ipfs/QmHash") == "https://ipfs.io/ipfs/QmHash"

    def test_http_passthrough(self):
        assert normalize_uri("https://example.com/1.json") == "https://example.com/1.json"

    def test_empty_and_malformed_passthrough(self):
        assert normalize_uri("") == ""
        assert normalize_uri("IPFS://upper") == "IPFS://upper"
        assert normalize_uri("ipfs:/missing-slash") == "ipfs:/missing-slash"

    def test_non_string_passthrough(self):
        assert normalize_uri(None) is None
        assert normalize_uri(42) == 42
