from __future__ import annotations

"""Pure address and amount validation for ledger inputs.

Addresses follow the reference ledger's encoding: a 32-byte public key
followed by a 4-byte checksum (the last four bytes of the key's SHA-512/256
digest), base32-encoded without padding into 58 uppercase characters.

Amounts are scaled with integer arithmetic only; decimals up to 19 exceed
what a binary float can represent exactly.
"""

import base64
import binascii
import hashlib
import re
from typing import Any, Union

from .entities import MAX_DECIMALS, MAX_UINT64, Address, AssetId
from .errors import InvalidAddress, InvalidAmount, InvalidAssetId

ADDRESS_LENGTH = 58
PUBLIC_KEY_LENGTH = 32
CHECKSUM_LENGTH = 4

_ADDRESS_PATTERN = re.compile(r"[A-Z2-7]{58}")
_INTEGER_LITERAL = re.compile(r"[0-9]+")


def sha512_256(data: bytes) -> bytes:
    """Return the SHA-512/256 digest used for checksums and identities."""

    return hashlib.new("sha512_256", data).digest()


def _checksum(public_key: bytes) -> bytes:
    return sha512_256(public_key)[-CHECKSUM_LENGTH:]


def encode_address(public_key: bytes) -> Address:
    """Encode a 32-byte public key into its canonical address string."""

    if not isinstance(public_key, (bytes, bytearray)) or len(public_key) != PUBLIC_KEY_LENGTH:
        raise InvalidAddress(f"Public key must be {PUBLIC_KEY_LENGTH} bytes.")
    raw = bytes(public_key) + _checksum(bytes(public_key))
    return base64.b32encode(raw).decode("ascii").rstrip("=")


def decode_address(address: Any) -> bytes:
    """Return the public key behind ``address`` or raise ``InvalidAddress``."""

    if not isinstance(address, str):
        raise InvalidAddress("Address must be a string.")
    if len(address) != ADDRESS_LENGTH:
        raise InvalidAddress(
            f"Enter a valid address ({ADDRESS_LENGTH} chars), got {len(address)}."
        )
    if not _ADDRESS_PATTERN.fullmatch(address):
        raise InvalidAddress("Address contains characters outside the base32 alphabet.")
    padded = address + "=" * (-len(address) % 8)
    try:
        raw = base64.b32decode(padded)
    except (binascii.Error, ValueError) as exc:
        raise InvalidAddress("Address is not valid base32.") from exc
    if len(raw) != PUBLIC_KEY_LENGTH + CHECKSUM_LENGTH:
        raise InvalidAddress("Address decodes to an unexpected length.")
    public_key, checksum = raw[:PUBLIC_KEY_LENGTH], raw[PUBLIC_KEY_LENGTH:]
    if _checksum(public_key) != checksum:
        raise InvalidAddress("Address checksum does not match.")
    return public_key


def validate_address(address: Any) -> Address:
    """Return ``address`` unchanged if it is a well-formed ledger address."""

    decode_address(address)
    return address


def validate_decimals(decimals: Any) -> int:
    if isinstance(decimals, bool) or not isinstance(decimals, int):
        raise InvalidAmount("Decimals must be a whole number.")
    if not 0 <= decimals <= MAX_DECIMALS:
        raise InvalidAmount(f"Decimals must be between 0 and {MAX_DECIMALS}.")
    return decimals


def parse_whole_number(value: Union[str, int], *, label: str = "Amount") -> int:
    """Parse a non-negative integer literal; fractions, signs and exponents are rejected."""

    if isinstance(value, bool):
        raise InvalidAmount(f"{label} must be a whole number.")
    if isinstance(value, int):
        if value < 0:
            raise InvalidAmount(f"{label} must not be negative.")
        return value
    if not isinstance(value, str) or not _INTEGER_LITERAL.fullmatch(value):
        raise InvalidAmount(f"{label} must be a whole number.")
    return int(value)


def to_base_units(human_amount: Union[str, int], decimals: int) -> int:
    """Scale a human-facing whole quantity into base units (``h * 10**d``)."""

    whole = parse_whole_number(human_amount)
    return whole * 10 ** validate_decimals(decimals)


def format_base_units(amount: int, decimals: int) -> str:
    """Render base units as a human quantity, trimming trailing zeros."""

    amount = validate_base_units(amount)
    scale = 10 ** validate_decimals(decimals)
    whole, frac = divmod(amount, scale)
    if not frac:
        return str(whole)
    digits = str(frac).rjust(decimals, "0").rstrip("0")
    return f"{whole}.{digits}"


def validate_base_units(amount: Any) -> int:
    """Check a base-unit amount fits the ledger's unsigned 64-bit width."""

    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidAmount("Amount must be an integer number of base units.")
    if amount < 0:
        raise InvalidAmount("Amount must not be negative.")
    if amount > MAX_UINT64:
        raise InvalidAmount("Amount exceeds the ledger's 64-bit limit.")
    return amount


def validate_asset_id(asset_id: Any) -> AssetId:
    """Normalize an asset id (int or digit string) to a positive int."""

    if isinstance(asset_id, bool):
        raise InvalidAssetId("Asset id must be a positive integer.")
    if isinstance(asset_id, str) and _INTEGER_LITERAL.fullmatch(asset_id.strip()):
        asset_id = int(asset_id.strip())
    if not isinstance(asset_id, int) or not 0 < asset_id <= MAX_UINT64:
        raise InvalidAssetId("Asset id must be a positive integer.")
    return asset_id


__all__ = [
    "ADDRESS_LENGTH",
    "decode_address",
    "encode_address",
    "format_base_units",
    "parse_whole_number",
    "sha512_256",
    "to_base_units",
    "validate_address",
    "validate_asset_id",
    "validate_base_units",
    "validate_decimals",
]
