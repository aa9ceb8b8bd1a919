"""Chain collaborators (JSON-RPC reader and listing source)."""

from nftmarket.meta.core.chain.rpc import JsonRpcChainReader, encode_call

__all__ = ["JsonRpcChainReader", "encode_call"]
