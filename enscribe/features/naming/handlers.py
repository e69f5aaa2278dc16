"""Naming event handlers for the Enscribe TUI."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

from enscribe.features.naming.detector import (
    is_contract_owner,
    is_ownable,
    is_reverse_claimable,
)
from enscribe.features.naming.models import NamingOutcome, NamingRequest
from enscribe.features.naming.screen import (
    CheckContractScreen,
    CheckContractSubmitted,
    NameContractScreen,
    NameContractSubmitted,
)
from enscribe.features.naming.service import NamingOrchestrator, NamingState
from enscribe.networks import NetworkContractSet
from enscribe.screens import ContractCheckResultScreen, LoadingScreen, NamingResultScreen
from enscribe.shared.logging import format_error_for_user, get_logger
from enscribe.shared.protocols import ChainClientProtocol

if TYPE_CHECKING:
    from enscribe.__main__ import EnscribeApp

logger = get_logger(__name__)

STATE_MESSAGES = {
    NamingState.DETECTING: "Detecting contract type...",
    NamingState.REGISTERING_SUBNAME: "Creating subname...",
    NamingState.SETTING_FORWARD: "Setting forward resolution...",
    NamingState.SETTING_REVERSE: "Setting reverse resolution...",
    NamingState.MIRRORING_SECONDARY: "Mirroring records to L2...",
}


class NamingHandlersMixin:
    """Mixin class providing naming-related event handlers for EnscribeApp."""

    primary_client: ChainClientProtocol | None
    primary_contracts: NetworkContractSet | None
    secondary_client: ChainClientProtocol | None
    secondary_contracts: NetworkContractSet | None
    orchestrator: NamingOrchestrator
    _loading_screen: LoadingScreen | None = None
    _naming_in_progress: bool = False

    def _require_client(self: "EnscribeApp") -> ChainClientProtocol | None:
        if self.primary_client is None:
            self.notify(
                "No signing client configured. Set ENSCRIBE_RPC_URL and ENSCRIBE_PRIVATE_KEY.",
                severity="error",
            )
        return self.primary_client

    def _require_contracts(self: "EnscribeApp") -> NetworkContractSet | None:
        if self.primary_contracts is None:
            self.notify(
                "No ENS contracts configured for this network. "
                "Set ENSCRIBE_NETWORK or ENSCRIBE_CONTRACTS_FILE.",
                severity="error",
            )
        return self.primary_contracts

    def _close_loading(self: "EnscribeApp") -> None:
        if self._loading_screen is not None:
            try:
                self.pop_screen()
            except Exception as e:
                logger.debug("Loading screen already closed: %s", e)
            self._loading_screen = None

    def show_name_contract(self: "EnscribeApp") -> None:
        if self._require_client() is None:
            return
        self.push_screen(NameContractScreen(has_secondary=self.secondary_client is not None))

    def on_name_contract_submitted(
        self: "EnscribeApp", event: NameContractSubmitted
    ) -> None:
        client = self._require_client()
        if client is None:
            return
        if self._naming_in_progress:
            self.notify("A naming request is already running", severity="warning")
            return

        self._naming_in_progress = True
        self._loading_screen = LoadingScreen("Naming contract...")
        self.push_screen(self._loading_screen)

        request = NamingRequest(
            name=event.name,
            contract_address=event.contract_address,
            primary_client=client,
            primary_contracts=self.primary_contracts,
            secondary_client=self.secondary_client,
            secondary_contracts=self.secondary_contracts,
        )

        def on_state_change(state: NamingState) -> None:
            message = STATE_MESSAGES.get(state)
            if message and self._loading_screen is not None:
                self.call_from_thread(self._loading_screen.update_message, message)

        def worker() -> None:
            self.orchestrator.on_state_change = on_state_change
            try:
                outcome = self.orchestrator.name_contract(request)
                self.call_from_thread(self._on_contract_named, outcome, None)
            except Exception as e:
                logger.exception("Naming %s failed", event.name)
                self.call_from_thread(self._on_contract_named, None, e)
            finally:
                self.orchestrator.on_state_change = None

        threading.Thread(target=worker, daemon=True).start()

    def _on_contract_named(
        self: "EnscribeApp", outcome: NamingOutcome | None, error: Exception | None
    ) -> None:
        self._naming_in_progress = False
        self._close_loading()

        if error is not None:
            self.notify(format_error_for_user(error), severity="error")
            return

        if outcome is None:
            return

        self.push_screen(NamingResultScreen(outcome))
        if outcome.success:
            self.notify(f"{outcome.name} is set up", severity="information")
        else:
            self.notify(format_error_for_user(outcome.error or ""), severity="error")

    def show_check_contract(self: "EnscribeApp") -> None:
        if self._require_client() is None:
            return
        self.push_screen(CheckContractScreen())

    def on_check_contract_submitted(
        self: "EnscribeApp", event: CheckContractSubmitted
    ) -> None:
        client = self._require_client()
        if client is None:
            return
        contracts = self._require_contracts()
        if contracts is None:
            return

        self._loading_screen = LoadingScreen("Checking contract...")
        self.push_screen(self._loading_screen)
        registry = contracts.require("registry")
        address = event.contract_address

        def worker() -> None:
            try:
                checks: dict[str, bool | str] = {
                    "Ownable": is_ownable(address, client),
                    "ReverseClaimer": is_reverse_claimable(address, client, registry),
                    "You are the owner": is_contract_owner(address, client, registry),
                }
                self.call_from_thread(self._on_contract_checked, address, checks, None)
            except Exception as e:
                self.call_from_thread(self._on_contract_checked, address, None, e)

        threading.Thread(target=worker, daemon=True).start()

    def _on_contract_checked(
        self: "EnscribeApp",
        address: str,
        checks: dict[str, bool | str] | None,
        error: Exception | None,
    ) -> None:
        self._close_loading()

        if error is not None:
            self.notify(format_error_for_user(error), severity="error")
            return

        self.push_screen(ContractCheckResultScreen(address, checks or {}))
