"""CSV codec package."""

from spendwise.codec.csv_codec import (
    HEADERS,
    decode_expenses,
    encode_expenses,
    filter_new_expenses,
)

__all__ = [
    "HEADERS",
    "decode_expenses",
    "encode_expenses",
    "filter_new_expenses",
]
