"""Shared modal screens for the Enscribe TUI."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.screen import ModalScreen
from textual.widgets import Button, DataTable, Label, Static

from enscribe.features.naming.models import NamingOutcome


class BaseModalScreen(ModalScreen):
    BINDINGS = [
        ("escape", "app.pop_screen", "Close"),
        ("tab", "focus_next", "Next"),
        ("shift+tab", "focus_previous", "Previous"),
    ]


class LoadingScreen(ModalScreen):
    def __init__(self, message: str = "Loading..."):
        super().__init__()
        self.message = message

    def compose(self) -> ComposeResult:
        yield Label(f"⏳ {self.message}", id="loading-label")

    def update_message(self, message: str) -> None:
        self.message = message
        self.query_one("#loading-label", Label).update(f"⏳ {message}")


class NamingResultScreen(BaseModalScreen):
    def __init__(self, outcome: NamingOutcome):
        super().__init__()
        self.outcome = outcome

    def compose(self) -> ComposeResult:
        if self.outcome.success:
            yield Label("✅ Contract named!", id="result-title")
        else:
            yield Label(
                f"❌ Naming stopped at {self.outcome.failed_step}", id="result-title"
            )
            yield Static(str(self.outcome.error), id="result-error")
        yield Label(f"Name: {self.outcome.name}")
        yield Label(f"Contract: {self.outcome.contract_address}")
        yield Label(f"Contract type: {self.outcome.contract_type.value}")
        yield DataTable(id="steps-table")
        yield Label(f"Explorer: {self.outcome.explorer_url}")
        yield Horizontal(Button("❌ Close", id="close-button"))

    def on_mount(self) -> None:
        table = self.query_one("#steps-table", DataTable)
        table.add_columns("Step", "Status", "Detail")
        for step, result in self.outcome.results.items():
            if result.tx_hash:
                detail = result.tx_hash
            elif result.reason:
                detail = result.reason.value
            else:
                detail = str(result.error or "")
            table.add_row(step, result.status.value, detail)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "close-button":
            self.app.pop_screen()


class ContractCheckResultScreen(BaseModalScreen):
    def __init__(self, address: str, checks: dict[str, bool | str]):
        super().__init__()
        self.address = address
        self.checks = checks

    def compose(self) -> ComposeResult:
        yield Label(f"🔍 {self.address}")
        for label, value in self.checks.items():
            if isinstance(value, bool):
                value = "✅ yes" if value else "❌ no"
            yield Label(f"{label}: {value}")
        yield Horizontal(Button("❌ Close", id="close-button"))

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "close-button":
            self.app.pop_screen()
