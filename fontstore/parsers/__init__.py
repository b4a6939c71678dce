from fontstore.parsers.cart_codec import (
    CART_SCHEMA_VERSION,
    CartDecodeError,
    decode_cart,
    encode_cart,
)

__all__ = [
    "CART_SCHEMA_VERSION",
    "CartDecodeError",
    "decode_cart",
    "encode_cart",
]
