"""Domain package exports for value objects, builders, and validation."""

from .builders import (
    build_asset_create,
    build_asset_opt_in,
    build_asset_transfer,
    build_nft_create,
    build_payment,
    build_token_create,
    content_hash,
)
from .entities import (
    Address,
    AssetCreate,
    AssetId,
    AssetOptIn,
    AssetParams,
    AssetRef,
    AssetTransfer,
    Payment,
    SignedTransaction,
    SubmissionOutcome,
    SubmissionResult,
    SuggestedParams,
    TransactionGroup,
    TransactionRequest,
    TxId,
)
from .group import AtomicGroupBuilder, derive_group_id
from .holdings import normalize_asset_ids
from .validation import to_base_units, validate_address

__all__ = [
    "Address",
    "AssetCreate",
    "AssetId",
    "AssetOptIn",
    "AssetParams",
    "AssetRef",
    "AssetTransfer",
    "AtomicGroupBuilder",
    "Payment",
    "SignedTransaction",
    "SubmissionOutcome",
    "SubmissionResult",
    "SuggestedParams",
    "TransactionGroup",
    "TransactionRequest",
    "TxId",
    "build_asset_create",
    "build_asset_opt_in",
    "build_asset_transfer",
    "build_nft_create",
    "build_payment",
    "build_token_create",
    "content_hash",
    "derive_group_id",
    "normalize_asset_ids",
    "to_base_units",
    "validate_address",
]
