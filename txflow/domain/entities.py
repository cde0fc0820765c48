from __future__ import annotations

"""Domain value objects shared across adapters, use-cases, and view models."""

import base64
from dataclasses import dataclass, field
from typing import Any, Dict, Literal, Optional, Tuple

Address = str
AssetId = int
TxId = str

RequestKind = Literal["pay", "axfer", "optin", "acfg"]

MAX_DECIMALS = 19
MAX_GROUP_SIZE = 16
MAX_UINT64 = 2**64 - 1


@dataclass(frozen=True)
class AssetRef:
    """Asset a flow moves, with the scale its human amounts use."""

    asset_id: Optional[AssetId]
    """Ledger asset id, or None for the native currency."""
    decimals: int
    unit_name: str

    @property
    def is_native(self) -> bool:
        return self.asset_id is None


NATIVE = AssetRef(asset_id=None, decimals=6, unit_name="ALGO")
USDC_TESTNET = AssetRef(asset_id=10458941, decimals=6, unit_name="USDC")


@dataclass(frozen=True)
class TransactionRequest:
    """Unsigned intent for one ledger transaction."""

    sender: Address
    """Canonical address of the account that signs and pays the fee."""

    @property
    def kind(self) -> RequestKind:
        raise NotImplementedError("TransactionRequest subclasses must define kind.")

    def to_payload(self) -> Dict[str, Any]:
        """Serialize into a canonical, JSON-compatible mapping."""

        raise NotImplementedError("TransactionRequest subclasses must implement to_payload().")


@dataclass(frozen=True)
class Payment(TransactionRequest):
    """Transfer of the ledger's native currency."""

    receiver: Address
    amount: int
    """Amount in base units (micro-units of the native currency)."""

    @property
    def kind(self) -> RequestKind:
        return "pay"

    def to_payload(self) -> Dict[str, Any]:
        return {
            "type": "pay",
            "sender": self.sender,
            "receiver": self.receiver,
            "amount": self.amount,
        }


@dataclass(frozen=True)
class AssetTransfer(TransactionRequest):
    """Transfer of an asset between two accounts."""

    receiver: Address
    asset_id: AssetId
    amount: int
    """Amount in the asset's base units."""

    @property
    def kind(self) -> RequestKind:
        return "axfer"

    def to_payload(self) -> Dict[str, Any]:
        return {
            "type": "axfer",
            "sender": self.sender,
            "receiver": self.receiver,
            "asset_id": self.asset_id,
            "amount": self.amount,
        }


@dataclass(frozen=True)
class AssetOptIn(TransactionRequest):
    """Zero-amount self transfer that lets ``sender`` hold ``asset_id``."""

    asset_id: AssetId

    @property
    def kind(self) -> RequestKind:
        return "optin"

    @property
    def receiver(self) -> Address:
        return self.sender

    @property
    def amount(self) -> int:
        return 0

    def to_payload(self) -> Dict[str, Any]:
        # Serialized exactly like the equivalent asset transfer.
        return {
            "type": "axfer",
            "sender": self.sender,
            "receiver": self.sender,
            "asset_id": self.asset_id,
            "amount": 0,
        }


@dataclass(frozen=True)
class AssetParams:
    """Creation parameters for a new asset."""

    name: str
    unit_name: str
    total: int
    """Total supply in base units."""
    decimals: int
    url: Optional[str] = None
    metadata_hash: Optional[bytes] = None
    """32-byte digest of ``url`` (the pointer, not the pointed-to content)."""
    default_frozen: bool = False

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "name": self.name,
            "unit_name": self.unit_name,
            "total": self.total,
            "decimals": self.decimals,
            "default_frozen": self.default_frozen,
        }
        if self.url is not None:
            payload["url"] = self.url
        if self.metadata_hash is not None:
            payload["metadata_hash"] = base64.b64encode(self.metadata_hash).decode("ascii")
        return payload


@dataclass(frozen=True)
class AssetCreate(TransactionRequest):
    """Creation of a new asset owned by ``sender``."""

    params: AssetParams

    @property
    def kind(self) -> RequestKind:
        return "acfg"

    def to_payload(self) -> Dict[str, Any]:
        return {"type": "acfg", "sender": self.sender, "params": self.params.to_payload()}


@dataclass(frozen=True)
class TransactionGroup:
    """Sealed, ordered set of requests submitted as one unit."""

    members: Tuple[TransactionRequest, ...]
    group_id: str
    """Base64 identity derived from the ordered member list, not the ledger group id."""

    def __post_init__(self) -> None:
        members = tuple(self.members)
        if not members:
            raise ValueError("TransactionGroup.members must not be empty.")
        if not all(isinstance(member, TransactionRequest) for member in members):
            raise TypeError("TransactionGroup.members must only contain TransactionRequest instances.")
        object.__setattr__(self, "members", members)

    @property
    def is_atomic(self) -> bool:
        return len(self.members) > 1

    def __len__(self) -> int:
        return len(self.members)


@dataclass(frozen=True)
class SuggestedParams:
    """Network parameters a transaction needs before it can be signed."""

    fee: int
    min_fee: int
    first_valid: int
    last_valid: int
    genesis_id: str
    genesis_hash: str


@dataclass(frozen=True)
class SignedTransaction:
    """Signer output: the ledger transaction id plus opaque signed bytes."""

    tx_id: TxId
    blob: bytes
    sender: Optional[Address] = None


@dataclass(frozen=True)
class SubmissionResult:
    """Successful submission confirmed by the ledger."""

    tx_ids: Tuple[TxId, ...]
    """Transaction ids in member order."""
    confirmed_round: Optional[int] = None
    asset_id: Optional[AssetId] = None
    """Index of the asset created by the submission, if any."""


@dataclass(frozen=True)
class SubmissionOutcome:
    """Success or failure of one orchestrated action, consumed by the reporter."""

    status: Literal["success", "failure"]
    tx_ids: Tuple[TxId, ...] = ()
    kind: Optional[str] = None
    message: str = ""
    confirmed_round: Optional[int] = None
    asset_id: Optional[AssetId] = None
    details: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def succeeded(cls, result: SubmissionResult) -> "SubmissionOutcome":
        return cls(
            status="success",
            tx_ids=tuple(result.tx_ids),
            confirmed_round=result.confirmed_round,
            asset_id=result.asset_id,
        )

    @classmethod
    def failed(cls, kind: str, message: str, **details: Any) -> "SubmissionOutcome":
        return cls(status="failure", kind=kind, message=message, details=dict(details))

    @property
    def ok(self) -> bool:
        return self.status == "success"

    def to_dict(self) -> Dict[str, Any]:
        """Return the outcome surface exposed to UI code."""

        if self.ok:
            payload: Dict[str, Any] = {"status": "success", "txIds": list(self.tx_ids)}
            if self.asset_id is not None:
                payload["assetId"] = self.asset_id
            return payload
        return {"status": "failure", "kind": self.kind, "message": self.message}


__all__ = [
    "Address",
    "AssetCreate",
    "AssetId",
    "AssetOptIn",
    "AssetParams",
    "AssetRef",
    "AssetTransfer",
    "MAX_DECIMALS",
    "MAX_GROUP_SIZE",
    "MAX_UINT64",
    "NATIVE",
    "Payment",
    "SignedTransaction",
    "SubmissionOutcome",
    "SubmissionResult",
    "SuggestedParams",
    "TransactionGroup",
    "TransactionRequest",
    "TxId",
    "USDC_TESTNET",
]
