"""Pin content through the backend and mint a one-of-one asset pointing at it."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from txflow.domain.builders import build_nft_create
from txflow.domain.entities import Address, SubmissionOutcome
from txflow.domain.errors import InvalidAssetParams, PinningFailed, UseCaseError
from txflow.domain.ports import PinningPort
from txflow.domain.validation import validate_address
from txflow.usecases.submit_transactions import SubmitTransactions, outcome_from_error

_log = logging.getLogger(__name__)


@dataclass
class MintNft:
    pinning_port: PinningPort
    submit: SubmitTransactions

    def __call__(
        self,
        sender: Address,
        content: bytes,
        filename: str,
        *,
        name: Optional[str] = None,
    ) -> SubmissionOutcome:
        try:
            sender = validate_address(sender)
            if not content:
                raise InvalidAssetParams("Select a file to mint.")
            # Nothing gets pinned for a wallet that cannot sign the mint.
            self.submit.require_signer()
            url = self._pin(content, filename)
            request = build_nft_create(sender, url, name=name)
        except UseCaseError as exc:
            return outcome_from_error(exc)

        _log.info("Minting NFT %r for %s at %s", request.params.name, sender, url)
        return self.submit.attempt(request)

    def _pin(self, content: bytes, filename: str) -> str:
        try:
            url = self.pinning_port.pin(bytes(content), filename or "upload.bin")
        except Exception as exc:
            _log.warning("Pinning %s failed: %s", filename, exc)
            raise PinningFailed(f"Could not pin {filename or 'file'}: {exc}") from exc
        url = (url or "").strip()
        if not url:
            raise PinningFailed("Backend did not return a valid metadata URL.")
        return url


__all__ = ["MintNft"]
