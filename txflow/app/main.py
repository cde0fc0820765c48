# txflow/app/main.py
from __future__ import annotations

import argparse
import importlib
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Callable, Optional, Sequence

# ---- Use cases ----
from ..usecases.check_opt_in import CheckOptIn
from ..usecases.create_token import CreateToken
from ..usecases.mint_nft import MintNft
from ..usecases.opt_in_asset import OptInAsset, OptInResult
from ..usecases.send_atomic_transfer import SendAtomicTransfer
from ..usecases.send_payment import SendPayment
from ..usecases.submit_transactions import SubmitTransactions

# ---- Adapters ----
from ..adapters.algod_rest import AlgodRestAdapter
from ..adapters.pinning_rest import PinningRestAdapter

from ..domain.entities import NATIVE, USDC_TESTNET, AssetRef, SubmissionOutcome
from ..domain.errors import UseCaseError
from ..domain.ports import LedgerPort, PinningPort, SignerPort
from ..utils import logging as logging_utils
from ..viewmodels.outcome_format import OutcomeReport, format_outcome, kind_label
from .settings import Settings

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_UNAVAILABLE = 2


class TxFlowApp:
    """Composition root: settings -> adapters -> use cases."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        ledger: Optional[LedgerPort] = None,
        signer: Optional[SignerPort] = None,
        pinning: Optional[PinningPort] = None,
    ) -> None:
        self._log = logging.getLogger(__name__)
        self.settings = settings or Settings()

        # ---- Adapters ----
        self.ledger: LedgerPort = ledger or AlgodRestAdapter(
            self.settings.algod_url,
            token=self.settings.algod_token,
            request_timeout_s=self.settings.request_timeout_s,
            retries=self.settings.retries,
        )
        self.pinning: PinningPort = pinning or PinningRestAdapter(
            self.settings.pinning_base_url,
            upload_timeout_s=self.settings.upload_timeout_s,
        )
        self.signer = signer

        # ---- Use cases ----
        self.submit = SubmitTransactions(
            self.ledger,
            signer,
            wait_rounds=self.settings.wait_rounds,
            max_group_size=self.settings.max_group_size,
        )
        self.check_opt_in = CheckOptIn(self.ledger)
        self.send_payment = SendPayment(self.submit)
        self.opt_in_asset = OptInAsset(self.check_opt_in, self.submit)
        self.create_token = CreateToken(self.submit)
        self.mint_nft = MintNft(self.pinning, self.submit)
        self._log.debug("Wired ledger=%s signer=%s", type(self.ledger).__name__, type(signer).__name__)

    def atomic_transfer(self, asset: AssetRef = USDC_TESTNET) -> SendAtomicTransfer:
        return SendAtomicTransfer(self.check_opt_in, self.submit, asset=asset)

    def report(self, outcome: SubmissionOutcome, **kwargs: Any) -> OutcomeReport:
        return format_outcome(outcome, explorer_base_url=self.settings.explorer_base_url, **kwargs)


# ---------------------------------------------------------------------------
# Command line
# ---------------------------------------------------------------------------


def load_signer(target: str) -> SignerPort:
    """Instantiate a signer from ``package.module:factory``."""
    module_name, sep, attr = (target or "").partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"Signer must be given as module:factory, got {target!r}")
    module = importlib.import_module(module_name)
    factory: Callable[[], SignerPort] = getattr(module, attr)
    return factory()


def _asset_ref(args: argparse.Namespace, default: Optional[AssetRef]) -> Optional[AssetRef]:
    if args.asset_id is None:
        return default
    return AssetRef(asset_id=args.asset_id, decimals=args.decimals, unit_name=args.unit)


def _cmd_check_optin(app: TxFlowApp, args: argparse.Namespace) -> Any:
    try:
        held = app.check_opt_in(args.address, args.asset_id)
    except UseCaseError as exc:
        return SubmissionOutcome.failed(exc.code, exc.message)
    return {"address": args.address, "assetId": args.asset_id, "optedIn": held}


def _cmd_send(app: TxFlowApp, args: argparse.Namespace) -> Any:
    return app.send_payment(args.sender, args.receiver, args.amount, _asset_ref(args, None))


def _cmd_optin(app: TxFlowApp, args: argparse.Namespace) -> Any:
    return app.opt_in_asset(args.address, args.asset_id)


def _cmd_atomic(app: TxFlowApp, args: argparse.Namespace) -> Any:
    flow = app.atomic_transfer(_asset_ref(args, USDC_TESTNET))
    return flow(args.sender, args.receiver, native_amount=args.algo, asset_amount=args.asset_amount)


def _cmd_mint_token(app: TxFlowApp, args: argparse.Namespace) -> Any:
    return app.create_token(
        args.sender,
        name=args.name,
        unit_name=args.unit,
        total=args.total,
        decimals=args.decimals,
    )


def _cmd_mint_nft(app: TxFlowApp, args: argparse.Namespace) -> Any:
    path = Path(args.file)
    try:
        content = path.read_bytes()
    except OSError as exc:
        return SubmissionOutcome.failed("InvalidAssetParams", f"Cannot read {path}: {exc.strerror}")
    return app.mint_nft(args.sender, content, path.name, name=args.name)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="txflow", description="Build, sign and submit ledger transactions.")
    parser.add_argument("--signer", help="Signer factory as module:callable (default: $TXFLOW_SIGNER)")
    parser.add_argument("--algod-server", help="Node URL (default: $TXFLOW_ALGOD_SERVER or TestNet)")
    parser.add_argument("--explorer-url", help="Explorer root used for links")
    parser.add_argument("--json", action="store_true", help="Print the outcome as JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    def asset_options(p: argparse.ArgumentParser, *, default_unit: str) -> None:
        p.add_argument("--asset-id", type=int, help="Asset to move instead of the default")
        p.add_argument("--decimals", type=int, default=6, help="Decimals of --asset-id (default: 6)")
        p.add_argument("--unit", default=default_unit, help="Unit name shown in messages")

    p = sub.add_parser("check-optin", help="Tell whether an account holds an asset")
    p.add_argument("address")
    p.add_argument("asset_id")
    p.set_defaults(handler=_cmd_check_optin)

    p = sub.add_parser("send", help=f"Send {NATIVE.unit_name} or an asset")
    p.add_argument("sender")
    p.add_argument("receiver")
    p.add_argument("amount", help="Whole human units")
    asset_options(p, default_unit="ASA")
    p.set_defaults(handler=_cmd_send)

    p = sub.add_parser("optin", help="Opt an account in to an asset")
    p.add_argument("address")
    p.add_argument("asset_id")
    p.set_defaults(handler=_cmd_optin)

    p = sub.add_parser("atomic", help=f"Send {NATIVE.unit_name} and {USDC_TESTNET.unit_name} atomically")
    p.add_argument("sender")
    p.add_argument("receiver")
    p.add_argument("--algo", default="1", help="Native amount in whole units (default: 1)")
    p.add_argument("--asset-amount", default="1", help="Asset amount in whole units (default: 1)")
    asset_options(p, default_unit=USDC_TESTNET.unit_name)
    p.set_defaults(handler=_cmd_atomic)

    p = sub.add_parser("mint-token", help="Create a fungible token")
    p.add_argument("sender")
    p.add_argument("--name", required=True)
    p.add_argument("--unit", required=True)
    p.add_argument("--total", required=True, help="Supply in whole units")
    p.add_argument("--decimals", type=int, default=6)
    p.set_defaults(handler=_cmd_mint_token)

    p = sub.add_parser("mint-nft", help="Pin a file and mint a one-of-one asset")
    p.add_argument("sender")
    p.add_argument("file")
    p.add_argument("--name", help="Asset name (default: MasterPass Ticket)")
    p.set_defaults(handler=_cmd_mint_nft)
    return parser


def _emit(app: TxFlowApp, result: Any, *, as_json: bool) -> int:
    if isinstance(result, OptInResult):
        if result.already_opted_in:
            if as_json:
                print(json.dumps({"status": "success", "alreadyOptedIn": True}))
            else:
                print("Already opted in.")
            return EXIT_OK
        result = result.outcome

    if isinstance(result, dict):
        if as_json:
            print(json.dumps(result))
        else:
            print(f"{result['address']} {'is' if result['optedIn'] else 'is not'} opted in to {result['assetId']}")
        return EXIT_OK if result["optedIn"] else EXIT_FAILED

    if as_json:
        print(json.dumps(result.to_dict()))
    else:
        stream = sys.stdout if result.ok else sys.stderr
        for line in app.report(result).lines():
            print(line, file=stream)
    if result.ok:
        return EXIT_OK
    if result.kind in ("LedgerUnavailable", "SignerUnavailable", "PinningFailed"):
        return EXIT_UNAVAILABLE
    return EXIT_FAILED


def main(argv: Optional[Sequence[str]] = None, *, environ: Optional[dict] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    level = logging_utils.configure_root(verbose=args.verbose)
    log = logging.getLogger(__name__)
    log.debug("Log level %s", logging_utils.level_name(level))

    try:
        settings = Settings.from_env(environ).with_overrides(
            algod_server=args.algod_server,
            explorer_base_url=args.explorer_url,
        )
    except ValueError as exc:
        parser.error(str(exc))

    signer_target = args.signer or (os.environ if environ is None else environ).get("TXFLOW_SIGNER")
    signer: Optional[SignerPort] = None
    if signer_target:
        try:
            signer = load_signer(signer_target)
        except (ImportError, AttributeError, ValueError, TypeError) as exc:
            parser.error(f"cannot load signer {signer_target!r}: {exc}")

    app = TxFlowApp(settings, signer=signer)
    log.debug("Running %s", args.command)
    result = args.handler(app, args)
    if isinstance(result, SubmissionOutcome) and not result.ok:
        log.info("%s failed: %s", args.command, kind_label(result.kind))
    return _emit(app, result, as_json=args.json)


if __name__ == "__main__":
    sys.exit(main())
