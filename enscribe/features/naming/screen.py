"""Naming-related modal screens for the Enscribe TUI."""

from typing import cast

from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.message import Message
from textual.widgets import Button, Input, Label

from enscribe.features.naming.validators import NameParser
from enscribe.screens import BaseModalScreen
from enscribe.validation import AddressValidator


class NameContractScreen(BaseModalScreen):
    def __init__(self, has_secondary: bool = False, address: str = ""):
        super().__init__()
        self.has_secondary = has_secondary
        self.default_address = address

    def compose(self) -> ComposeResult:
        yield Label("🏷️ Name a Contract")
        yield Label("ENS name (e.g. mycontract.myname.eth):")
        yield Input(placeholder="label.parent.eth", id="name-input")
        yield Label("Contract address:")
        yield Input(
            placeholder="0x...",
            id="address-input",
            value=self.default_address,
        )
        yield Label("", id="validation-label")
        if self.has_secondary:
            yield Label("💡 Records will also be mirrored to the configured L2.")
        yield Horizontal(
            Button("✓ Name", id="name-button", variant="primary"),
            Button("✗ Cancel", id="cancel-button"),
        )

    def _validation_error(self, name: str, address: str) -> str | None:
        name_result = NameParser.validate(name)
        if not name_result.is_valid:
            return name_result.error_message
        address_result = AddressValidator.validate(address)
        if not address_result.is_valid:
            return address_result.error_message
        return None

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "name-button":
            name = cast(Input, self.query_one("#name-input")).value.strip()
            address = cast(Input, self.query_one("#address-input")).value.strip()

            error = self._validation_error(name, address)
            if error:
                cast(Label, self.query_one("#validation-label")).update(f"⚠️ {error}")
                return

            self.post_message(NameContractSubmitted(name=name, contract_address=address))
            self.app.pop_screen()
        elif event.button.id == "cancel-button":
            self.app.pop_screen()


class NameContractSubmitted(Message):
    def __init__(self, name: str, contract_address: str):
        super().__init__()
        self.name = name
        self.contract_address = contract_address


class CheckContractScreen(BaseModalScreen):
    def compose(self) -> ComposeResult:
        yield Label("🔍 Check Contract Capabilities")
        yield Label("Contract address:")
        yield Input(placeholder="0x...", id="address-input")
        yield Horizontal(
            Button("✓ Check", id="check-button", variant="primary"),
            Button("✗ Cancel", id="cancel-button"),
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "check-button":
            address = cast(Input, self.query_one("#address-input")).value.strip()
            result = AddressValidator.validate(address)
            if not result.is_valid:
                self.notify(result.error_message or "Invalid address", severity="error")
                return
            self.post_message(CheckContractSubmitted(contract_address=address))
            self.app.pop_screen()
        elif event.button.id == "cancel-button":
            self.app.pop_screen()


class CheckContractSubmitted(Message):
    def __init__(self, contract_address: str):
        super().__init__()
        self.contract_address = contract_address
