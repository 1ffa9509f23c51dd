from oratestkit.utils import equality, logging, network, streams, text, versions

__all__ = ("equality", "logging", "network", "streams", "text", "versions")
