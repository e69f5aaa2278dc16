"""Naming orchestration for Enscribe.

``NamingOrchestrator`` walks one request through a fixed, linear sequence of
states, one on-chain step per state::

    DETECTING -> REGISTERING_SUBNAME -> SETTING_FORWARD -> SETTING_REVERSE
              -> MIRRORING_SECONDARY -> DONE

Every write waits for its receipt before the next state is entered. A fatal
error stops the walk and is reported on the outcome together with the
transactions already sent; nothing is rolled back.
"""

from __future__ import annotations

import logging
import uuid
from enum import Enum
from typing import Callable

from enscribe.features.naming.detector import ContractTypeDetector
from enscribe.features.naming.errors import ChainCallError, InvalidInputError, NamingError
from enscribe.features.naming.forward import ForwardResolutionSetter
from enscribe.features.naming.models import (
    ContractType,
    NamingOutcome,
    NamingRequest,
    NamingStep,
    OperationResult,
    SkipReason,
)
from enscribe.features.naming.reverse import ReverseResolutionSetter
from enscribe.features.naming.subname import SubnameRegistrar
from enscribe.features.naming.validators import parse_normalized_name
from enscribe.networks import (
    NetworkContractSet,
    UnknownNetworkError,
    evm_coin_type,
    get_network_contracts,
    get_network_name,
)
from enscribe.shared.config import NamingConfig
from enscribe.shared.protocols import ChainClientProtocol
from enscribe.shared.telemetry import StepReporter, TelemetryClient
from enscribe.validation import AddressValidator

logger = logging.getLogger(__name__)


class NamingState(Enum):
    DETECTING = "detecting"
    REGISTERING_SUBNAME = "registering_subname"
    SETTING_FORWARD = "setting_forward"
    SETTING_REVERSE = "setting_reverse"
    MIRRORING_SECONDARY = "mirroring_secondary"
    DONE = "done"
    FAILED = "failed"


class _StepFailed(Exception):
    def __init__(self, step: NamingStep, error: NamingError):
        self.step = step
        self.error = error
        super().__init__(str(error))


class NamingOrchestrator:
    def __init__(
        self,
        config: NamingConfig | None = None,
        telemetry: TelemetryClient | None = None,
        on_state_change: Callable[[NamingState], None] | None = None,
    ):
        self.config = config or NamingConfig()
        self.telemetry = telemetry
        self.on_state_change = on_state_change
        self.state = NamingState.DONE

    def _enter(self, state: NamingState) -> None:
        self.state = state
        logger.debug("Naming state -> %s", state.value)
        if self.on_state_change:
            self.on_state_change(state)

    @staticmethod
    def _resolve_contracts(
        client: ChainClientProtocol, contracts: NetworkContractSet | None
    ) -> NetworkContractSet:
        if contracts is not None:
            return contracts
        try:
            return get_network_contracts(get_network_name(client.chain_id))
        except UnknownNetworkError as e:
            raise InvalidInputError(str(e)) from e

    def _reporter(self, request: NamingRequest) -> StepReporter:
        enabled = (
            self.config.enable_telemetry
            if request.enable_telemetry is None
            else request.enable_telemetry
        )
        telemetry = self.telemetry
        if enabled and telemetry is None:
            telemetry = TelemetryClient(self.config)
        return StepReporter(
            correlation_id=request.correlation_id or str(uuid.uuid4()),
            op_type=request.op_type or self.config.op_type,
            enabled=enabled,
            client=telemetry,
        )

    @staticmethod
    def _run_step(
        step: NamingStep, results: dict[str, OperationResult], action: Callable[[], OperationResult]
    ) -> OperationResult:
        try:
            result = action()
        except Exception as e:
            # Clients outside this package may raise their own RPC errors.
            error = e if isinstance(e, NamingError) else ChainCallError(str(e))
            results[step.value] = OperationResult.failed(error)
            raise _StepFailed(step, error) from e
        results[step.value] = result
        return result

    def name_contract(self, request: NamingRequest) -> NamingOutcome:
        address_result = AddressValidator.validate(request.contract_address)
        if not address_result.is_valid:
            raise InvalidInputError(
                f"Invalid contract address {request.contract_address!r}: "
                f"{address_result.error_message}"
            )
        parse_normalized_name(request.name)

        name = request.name
        address = address_result.normalized_value
        primary = request.primary_client
        contracts = self._resolve_contracts(primary, request.primary_contracts)
        if not contracts.is_primary:
            raise InvalidInputError(
                f"Chain {primary.chain_id} is missing ENS registry, resolver, "
                "name wrapper or reverse registrar addresses"
            )

        secondary = request.secondary_client
        secondary_contracts: NetworkContractSet | None = None
        if secondary is not None:
            secondary_contracts = self._resolve_contracts(
                secondary, request.secondary_contracts
            )

        reporter = self._reporter(request)
        results: dict[str, OperationResult] = {}
        contract_type = ContractType.UNKNOWN
        failed_step: str | None = None
        error: NamingError | None = None

        logger.info(
            "Naming %s as %s on chain %s (correlation id %s)",
            address,
            name,
            primary.chain_id,
            reporter.correlation_id,
        )

        try:
            self._enter(NamingState.DETECTING)
            contract_type = ContractTypeDetector(primary, contracts).detect_contract_type(
                address
            )

            self._enter(NamingState.REGISTERING_SUBNAME)
            registrar = SubnameRegistrar(primary, contracts, reporter)
            self._run_step(
                NamingStep.SUBNAME,
                results,
                lambda: registrar.ensure_subname(name, address, contract_type),
            )

            self._enter(NamingState.SETTING_FORWARD)
            forward = ForwardResolutionSetter(primary, contracts, reporter)
            self._run_step(
                NamingStep.FORWARD_RESOLUTION,
                results,
                lambda: forward.set_forward_resolution(
                    name, address, contract_type=contract_type
                ),
            )

            self._enter(NamingState.SETTING_REVERSE)
            reverse = ReverseResolutionSetter(primary, contracts, reporter)
            self._run_step(
                NamingStep.REVERSE_RESOLUTION,
                results,
                lambda: reverse.set_reverse_resolution(name, address, contract_type),
            )

            if secondary is not None and secondary_contracts is not None:
                self._enter(NamingState.MIRRORING_SECONDARY)
                self._mirror_secondary(
                    name,
                    address,
                    contract_type,
                    forward,
                    secondary,
                    secondary_contracts,
                    reporter,
                    results,
                )

            self._enter(NamingState.DONE)
        except _StepFailed as failure:
            self._enter(NamingState.FAILED)
            failed_step = failure.step.value
            error = failure.error
            logger.error("Naming %s failed at %s: %s", name, failed_step, error)

        transactions = {
            step: result.tx_hash
            for step, result in results.items()
            if result.is_performed and result.tx_hash
        }
        explorer_url = self.config.build_explorer_url(primary.chain_id, name)
        if error is None:
            logger.info("Contract named: %s", explorer_url)

        return NamingOutcome(
            success=error is None,
            name=name,
            contract_address=address,
            contract_type=contract_type,
            explorer_url=explorer_url,
            transactions=transactions,
            results=results,
            failed_step=failed_step,
            error=error,
        )

    def _mirror_secondary(
        self,
        name: str,
        address: str,
        contract_type: ContractType,
        forward: ForwardResolutionSetter,
        secondary: ChainClientProtocol,
        secondary_contracts: NetworkContractSet,
        reporter: StepReporter,
        results: dict[str, OperationResult],
    ) -> None:
        def mirror_forward() -> OperationResult:
            coin_type = secondary_contracts.coin_type
            if coin_type is None:
                coin_type = evm_coin_type(secondary.chain_id)
            # The secondary address lives on the primary resolver as a coin-type record.
            return forward.set_forward_resolution(
                name, address, coin_type=coin_type, contract_type=contract_type
            )

        self._run_step(NamingStep.L2_FORWARD_RESOLUTION, results, mirror_forward)

        reverse = ReverseResolutionSetter(secondary, secondary_contracts, reporter)
        try:
            result = reverse.set_secondary_reverse_resolution(name, address, contract_type)
        except Exception as e:
            logger.warning("Secondary reverse resolution skipped for %s: %s", address, e)
            result = OperationResult.skipped(SkipReason.SECONDARY_UNAVAILABLE)
        results[NamingStep.L2_REVERSE_RESOLUTION.value] = result


def name_contract(
    name: str,
    contract_address: str,
    primary_client: ChainClientProtocol,
    primary_contracts: NetworkContractSet | None = None,
    secondary_client: ChainClientProtocol | None = None,
    secondary_contracts: NetworkContractSet | None = None,
    correlation_id: str | None = None,
    op_type: str | None = None,
    enable_telemetry: bool | None = None,
    config: NamingConfig | None = None,
) -> NamingOutcome:
    """Name a contract with ENS in one call. See ``NamingOrchestrator``."""
    request = NamingRequest(
        name=name,
        contract_address=contract_address,
        primary_client=primary_client,
        primary_contracts=primary_contracts,
        secondary_client=secondary_client,
        secondary_contracts=secondary_contracts,
        correlation_id=correlation_id,
        op_type=op_type,
        enable_telemetry=enable_telemetry,
    )
    return NamingOrchestrator(config).name_contract(request)
