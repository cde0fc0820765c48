"""Side-effect-free constructors for single transaction requests.

Builders validate their own inputs so a request that exists is well formed.
They never consult ledger state: confirming a receiver's opt-in before an
asset transfer is the caller's job (see ``usecases.check_opt_in``).
"""

from __future__ import annotations

from typing import Optional, Union

from .entities import (
    Address,
    AssetCreate,
    AssetId,
    AssetOptIn,
    AssetParams,
    AssetTransfer,
    Payment,
)
from .errors import InvalidAmount, InvalidAssetParams
from .validation import (
    sha512_256,
    to_base_units,
    validate_address,
    validate_asset_id,
    validate_base_units,
    validate_decimals,
)

MAX_ASSET_NAME_BYTES = 32
MAX_UNIT_NAME_BYTES = 8
MAX_URL_BYTES = 96
METADATA_HASH_LENGTH = 32

NFT_UNIT_NAME = "MTK"
NFT_DEFAULT_NAME = "MasterPass Ticket"


def content_hash(url: str) -> bytes:
    """Digest anchoring an asset to its content pointer (the URL string itself)."""

    return sha512_256(url.encode("utf-8"))


def build_payment(sender: Address, receiver: Address, amount: int) -> Payment:
    return Payment(
        sender=validate_address(sender),
        receiver=validate_address(receiver),
        amount=validate_base_units(amount),
    )


def build_asset_transfer(
    sender: Address, receiver: Address, asset_id: AssetId, amount: int
) -> AssetTransfer:
    return AssetTransfer(
        sender=validate_address(sender),
        receiver=validate_address(receiver),
        asset_id=validate_asset_id(asset_id),
        amount=validate_base_units(amount),
    )


def build_asset_opt_in(sender: Address, asset_id: AssetId) -> AssetOptIn:
    return AssetOptIn(sender=validate_address(sender), asset_id=validate_asset_id(asset_id))


def _check_text(value: Optional[str], label: str, limit: int) -> str:
    text = (value or "").strip()
    if not text:
        raise InvalidAssetParams(f"Please enter an {label}.")
    if len(text.encode("utf-8")) > limit:
        raise InvalidAssetParams(f"{label.capitalize()} must be at most {limit} bytes.")
    return text


def build_asset_create(
    sender: Address,
    *,
    name: str,
    unit_name: str,
    total: int,
    decimals: int,
    url: Optional[str] = None,
    metadata_hash: Optional[bytes] = None,
    default_frozen: bool = False,
) -> AssetCreate:
    """Build an asset creation request from a base-unit total.

    ``total`` must be a whole number of human units at the given scale, i.e.
    a multiple of ``10**decimals``. When ``url`` is set the metadata hash is
    the digest of the URL string; a caller-supplied hash must match it.
    """

    sender = validate_address(sender)
    decimals = validate_decimals(decimals)
    total = validate_base_units(total)
    if total % 10**decimals:
        raise InvalidAmount(
            f"Total supply {total} is not a whole number of units at {decimals} decimals."
        )
    name = _check_text(name, "asset name", MAX_ASSET_NAME_BYTES)
    unit_name = _check_text(unit_name, "unit name", MAX_UNIT_NAME_BYTES)

    if url is not None:
        if not url.strip():
            raise InvalidAssetParams("Content URL must not be blank.")
        if len(url.encode("utf-8")) > MAX_URL_BYTES:
            raise InvalidAssetParams(f"Content URL must be at most {MAX_URL_BYTES} bytes.")
        expected = content_hash(url)
        if metadata_hash is None:
            metadata_hash = expected
        elif bytes(metadata_hash) != expected:
            raise InvalidAssetParams("Metadata hash must be the digest of the content URL.")
    elif metadata_hash is not None:
        raise InvalidAssetParams("Metadata hash requires a content URL.")

    if metadata_hash is not None and len(metadata_hash) != METADATA_HASH_LENGTH:
        raise InvalidAssetParams(f"Metadata hash must be {METADATA_HASH_LENGTH} bytes.")

    return AssetCreate(
        sender=sender,
        params=AssetParams(
            name=name,
            unit_name=unit_name,
            total=total,
            decimals=decimals,
            url=url,
            metadata_hash=bytes(metadata_hash) if metadata_hash is not None else None,
            default_frozen=bool(default_frozen),
        ),
    )


def build_token_create(
    sender: Address,
    *,
    name: str,
    unit_name: str,
    human_total: Union[str, int],
    decimals: int,
) -> AssetCreate:
    """Fungible token mint: the supply is entered in human units."""

    return build_asset_create(
        sender,
        name=name,
        unit_name=unit_name,
        total=to_base_units(human_total, decimals),
        decimals=decimals,
    )


def build_nft_create(sender: Address, url: str, *, name: Optional[str] = None) -> AssetCreate:
    """Single-unit, indivisible asset pointing at pinned content."""

    return build_asset_create(
        sender,
        name=(name or "").strip() or NFT_DEFAULT_NAME,
        unit_name=NFT_UNIT_NAME,
        total=1,
        decimals=0,
        url=url,
    )


__all__ = [
    "build_asset_create",
    "build_asset_opt_in",
    "build_asset_transfer",
    "build_nft_create",
    "build_payment",
    "build_token_create",
    "content_hash",
]
