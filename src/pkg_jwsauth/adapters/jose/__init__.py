from .codec import JWSTokenCodec

__all__ = ["JWSTokenCodec"]
