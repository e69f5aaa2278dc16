"""Main application entry point for Enscribe."""

from __future__ import annotations

import logging

from textual.app import App, ComposeResult
from textual.containers import Vertical
from textual.widgets import Button, Footer, Header, Label

from enscribe.chain import Web3ChainClient
from enscribe.features.naming.handlers import NamingHandlersMixin
from enscribe.features.naming.service import NamingOrchestrator
from enscribe.networks import (
    NetworkContractSet,
    UnknownNetworkError,
    get_network_contracts,
    get_network_name,
    load_network_contracts,
)
from enscribe.shared.config import ClientConfig, NamingConfig
from enscribe.shared.logging import setup_logging
from enscribe.shared.protocols import ChainClientProtocol

logger = logging.getLogger(__name__)


def _contracts_for(
    client: ChainClientProtocol | None, network: str | None
) -> NetworkContractSet | None:
    if client is None:
        return None
    try:
        return get_network_contracts(network or get_network_name(client.chain_id))
    except UnknownNetworkError as e:
        logger.warning("%s", e)
        return None


class EnscribeApp(NamingHandlersMixin, App):
    TITLE = "Enscribe"
    SUB_TITLE = "Name your contracts with ENS"

    BINDINGS = [
        ("n", "name_contract", "Name contract"),
        ("c", "check_contract", "Check contract"),
        ("q", "quit", "Quit"),
    ]

    def __init__(
        self,
        client_config: ClientConfig | None = None,
        naming_config: NamingConfig | None = None,
    ):
        super().__init__()
        self.client_config = client_config or ClientConfig.from_environment()
        self.naming_config = naming_config or NamingConfig.from_environment()
        self.orchestrator = NamingOrchestrator(self.naming_config)
        self.primary_client = None
        self.secondary_client = None
        self.primary_contracts = None
        self.secondary_contracts = None

    def compose(self) -> ComposeResult:
        yield Header()
        yield Vertical(
            Label("", id="account-label"),
            Button("🏷️ Name a Contract", id="name-contract-btn", variant="primary"),
            Button("🔍 Check Contract", id="check-contract-btn"),
            Button("Quit", id="quit-btn"),
        )
        yield Footer()

    def on_mount(self) -> None:
        config = self.client_config
        if config.contracts_file:
            load_network_contracts(config.contracts_file)

        try:
            if config.rpc_url and config.private_key:
                self.primary_client = Web3ChainClient.from_config(config)
                self.primary_contracts = _contracts_for(self.primary_client, config.network)
            self.secondary_client = Web3ChainClient.secondary_from_config(config)
            self.secondary_contracts = _contracts_for(
                self.secondary_client, config.l2_network
            )
        except Exception as e:
            logger.exception("Failed to configure chain clients")
            self.notify(f"Failed to configure chain clients: {e}", severity="error")

        account_label = self.query_one("#account-label", Label)
        if self.primary_client is not None:
            account_label.update(f"Account: {self.primary_client.account_address}")
        else:
            account_label.update("No signing account configured")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "name-contract-btn":
            self.show_name_contract()
        elif event.button.id == "check-contract-btn":
            self.show_check_contract()
        elif event.button.id == "quit-btn":
            self.exit()

    def action_name_contract(self) -> None:
        self.show_name_contract()

    def action_check_contract(self) -> None:
        self.show_check_contract()


def main():
    """Entry point for the application."""
    setup_logging()
    logger.info("Enscribe starting")
    app = EnscribeApp()
    app.run()


if __name__ == "__main__":
    main()
