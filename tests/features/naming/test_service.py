from unittest.mock import Mock

import pytest
from eth_utils import to_checksum_address

from enscribe.features.naming.abi import ADDR, ADDR_FOR_COIN, SET_ADDR, SET_ADDR_FOR_COIN
from enscribe.features.naming.ens import namehash, reverse_node
from enscribe.features.naming.errors import (
    ChainCallError,
    InvalidInputError,
    InvalidNameFormatError,
    NamingStepError,
    UnsupportedContractTypeError,
)
from enscribe.features.naming.models import (
    ContractType,
    NamingRequest,
    NamingStep,
    SkipReason,
)
from enscribe.features.naming.service import NamingOrchestrator, NamingState, name_contract
from enscribe.networks import NetworkContractSet, evm_coin_type, get_network_contracts
from enscribe.shared.config import NamingConfig
from enscribe.shared.network import NetworkError, NetworkErrorType
from enscribe.shared.telemetry import (
    STEP_FORWARD,
    STEP_REVERSE_SET_NAME_FOR_ADDR,
    STEP_SUBNAME,
    TelemetryClient,
)
from tests.fakes import (
    BASE_CHAIN_ID,
    CALLER,
    CONTRACT,
    L2_REVERSE_REGISTRAR,
    OTHER_ACCOUNT,
    REGISTRY,
    RESOLVER,
    ZERO_ADDRESS,
    FakeChainClient,
)

NAME = "vault.myname.eth"
CHECKSUMMED_CONTRACT = to_checksum_address(CONTRACT)
PRIMARY_STEPS = {"subname", "forwardResolution", "reverseResolution"}


def configure_chain(
    client,
    contracts,
    owner=CALLER,
    reverse_owner=ZERO_ADDRESS,
    subname_exists=False,
    forward=None,
):
    """Wire the fake client so reads reflect earlier writes, like a real chain.

    ``owner=None`` makes the contract's owner() revert.
    """
    state = {"nodes": set(), "addr": {}, "coin_addr": {}}
    if subname_exists:
        state["nodes"].add(namehash(NAME))
    if forward:
        state["addr"][namehash(NAME)] = forward

    registry = contracts.registry
    resolver = contracts.resolver
    client.set_read(registry, "recordExists", lambda args: args[0] in state["nodes"])
    client.set_read(contracts.wrapper, "isWrapped", False)
    client.set_read(
        registry,
        "owner",
        lambda args: reverse_owner if args[0] == reverse_node(CONTRACT) else ZERO_ADDRESS,
    )
    if owner is not None:
        client.set_read(CONTRACT, "owner", owner)
    client.set_read(resolver, ADDR, lambda args: state["addr"].get(args[0], ZERO_ADDRESS))
    client.set_read(
        resolver, ADDR_FOR_COIN, lambda args: state["coin_addr"].get(tuple(args), b"")
    )

    client.on_write[(registry.lower(), "setSubnodeRecord")] = lambda args: state[
        "nodes"
    ].add(namehash(NAME))
    client.on_write[(resolver.lower(), SET_ADDR)] = lambda args: state["addr"].update(
        {args[0]: args[1]}
    )
    client.on_write[(resolver.lower(), SET_ADDR_FOR_COIN)] = lambda args: state[
        "coin_addr"
    ].update({(args[0], args[1]): args[2]})
    return state


def request_for(client, contracts, **kwargs):
    return NamingRequest(
        name=NAME,
        contract_address=CONTRACT,
        primary_client=client,
        primary_contracts=contracts,
        **kwargs,
    )


class TestNameContract:
    def test_fresh_ownable_contract(self, client, contracts):
        configure_chain(client, contracts)

        outcome = NamingOrchestrator().name_contract(request_for(client, contracts))

        assert outcome.success
        assert outcome.error is None
        assert outcome.contract_type is ContractType.OWNABLE
        assert set(outcome.transactions) == PRIMARY_STEPS
        assert [w.function for w in client.writes] == [
            "setSubnodeRecord",
            SET_ADDR,
            "setNameForAddr",
        ]
        assert outcome.transactions["subname"] == client.writes[0].tx_hash
        assert outcome.explorer_url == "https://app.enscribe.xyz/explore/1/vault.myname.eth"

    def test_already_named_contract_only_sets_reverse(self, client, contracts):
        shouting = "0x" + CONTRACT[2:].upper()
        configure_chain(client, contracts, subname_exists=True, forward=shouting)

        outcome = NamingOrchestrator().name_contract(request_for(client, contracts))

        assert outcome.success
        assert set(outcome.transactions) == {"reverseResolution"}
        assert outcome.results["subname"].reason is SkipReason.ALREADY_EXISTS
        assert outcome.results["forwardResolution"].reason is SkipReason.ALREADY_SET
        assert [w.function for w in client.writes] == ["setNameForAddr"]

    def test_unknown_contract_fails_at_reverse_resolution(self, client, contracts):
        configure_chain(client, contracts, owner=None)

        outcome = NamingOrchestrator().name_contract(request_for(client, contracts))

        assert not outcome.success
        assert outcome.contract_type is ContractType.UNKNOWN
        assert outcome.failed_step == "reverseResolution"
        assert isinstance(outcome.error, UnsupportedContractTypeError)
        assert set(outcome.transactions) == {"subname", "forwardResolution"}
        assert outcome.results["reverseResolution"].is_failed
        with pytest.raises(NamingStepError) as exc_info:
            outcome.raise_for_error()
        assert exc_info.value.step == "reverseResolution"

    def test_second_run_only_repeats_reverse(self, client, contracts):
        configure_chain(client, contracts)
        orchestrator = NamingOrchestrator()

        first = orchestrator.name_contract(request_for(client, contracts))
        second = orchestrator.name_contract(request_for(client, contracts))

        assert set(first.transactions) == PRIMARY_STEPS
        assert set(second.transactions) == {"reverseResolution"}
        assert len(client.writes_to("setSubnodeRecord")) == 1
        assert len(client.writes_to(SET_ADDR)) == 1

    def test_reverse_claimer_contract(self, client, contracts):
        configure_chain(client, contracts, owner=None, reverse_owner=CALLER)

        outcome = NamingOrchestrator().name_contract(request_for(client, contracts))

        assert outcome.success
        assert outcome.contract_type is ContractType.REVERSE_CLAIMER
        reverse_write = client.writes[-1]
        assert reverse_write.address == RESOLVER
        assert reverse_write.function == "setName"
        assert reverse_write.args == [reverse_node(CONTRACT), NAME]

    def test_not_owner_skips_reverse_but_succeeds(self, client, contracts):
        configure_chain(client, contracts, owner=OTHER_ACCOUNT)

        outcome = NamingOrchestrator().name_contract(request_for(client, contracts))

        assert outcome.success
        assert outcome.contract_type is ContractType.OWNABLE
        assert set(outcome.transactions) == {"subname", "forwardResolution"}
        assert outcome.results["reverseResolution"].reason is SkipReason.NOT_OWNER
        assert client.writes_to("setNameForAddr") == []

    def test_subname_failure_stops_the_pipeline(self, client, contracts):
        configure_chain(client, contracts)
        client.write_errors[(REGISTRY, "setSubnodeRecord")] = ChainCallError(
            "execution reverted: Unauthorised"
        )

        outcome = NamingOrchestrator().name_contract(request_for(client, contracts))

        assert not outcome.success
        assert outcome.failed_step == NamingStep.SUBNAME.value
        assert outcome.transactions == {}
        assert client.writes == []
        assert "forwardResolution" not in outcome.results

    def test_foreign_client_error_reported_on_outcome(self, client, contracts):
        configure_chain(client, contracts)
        rpc_error = RuntimeError("connection reset by peer")
        client.write_errors[(REGISTRY, "setSubnodeRecord")] = rpc_error

        outcome = NamingOrchestrator().name_contract(request_for(client, contracts))

        assert not outcome.success
        assert outcome.failed_step == "subname"
        assert isinstance(outcome.error, ChainCallError)
        assert outcome.error.__cause__ is rpc_error
        assert outcome.results["subname"].is_failed

    def test_foreign_client_error_keeps_earlier_transactions(self, client, contracts):
        configure_chain(client, contracts)
        client.write_errors[(RESOLVER, SET_ADDR)] = RuntimeError("nonce too low")

        outcome = NamingOrchestrator().name_contract(request_for(client, contracts))

        assert outcome.failed_step == "forwardResolution"
        assert set(outcome.transactions) == {"subname"}
        with pytest.raises(NamingStepError):
            outcome.raise_for_error()

    def test_contracts_resolved_from_chain_id(self):
        sepolia = get_network_contracts("sepolia")
        client = FakeChainClient(chain_id=11155111)
        configure_chain(client, sepolia)

        outcome = NamingOrchestrator().name_contract(request_for(client, None))

        assert outcome.success
        assert client.writes[0].address == sepolia.registry
        assert outcome.explorer_url.endswith("/11155111/vault.myname.eth")

    def test_outcome_to_dict(self, client, contracts):
        configure_chain(client, contracts)

        data = NamingOrchestrator().name_contract(request_for(client, contracts)).to_dict()

        assert data["success"] is True
        assert data["contractAddress"] == CHECKSUMMED_CONTRACT
        assert data["contractType"] == "Ownable"
        assert set(data["transactions"]) == PRIMARY_STEPS
        assert data["failedStep"] is None


class TestInputValidation:
    def test_invalid_address_rejected_before_chain_calls(self, client, contracts):
        request = request_for(client, contracts)
        request.contract_address = "0x1234"

        with pytest.raises(InvalidInputError, match="0x1234"):
            NamingOrchestrator().name_contract(request)
        assert client.read_calls == []

    def test_padded_address_is_trimmed_and_checksummed(self, client, contracts):
        configure_chain(client, contracts, owner=None, reverse_owner=CALLER)
        request = request_for(client, contracts)
        request.contract_address = f"  {CONTRACT}\n"

        outcome = NamingOrchestrator().name_contract(request)

        assert outcome.success
        assert outcome.contract_type is ContractType.REVERSE_CLAIMER
        assert outcome.contract_address == CHECKSUMMED_CONTRACT
        assert client.writes_to(SET_ADDR)[0].args == [namehash(NAME), CHECKSUMMED_CONTRACT]
        assert client.writes_to("setName")[0].args == [reverse_node(CONTRACT), NAME]

    def test_name_without_dot_rejected(self, client, contracts):
        request = request_for(client, contracts)
        request.name = "vault"

        with pytest.raises(InvalidNameFormatError):
            NamingOrchestrator().name_contract(request)
        assert client.read_calls == []

    def test_name_with_empty_label_rejected(self, client, contracts):
        request = request_for(client, contracts)
        request.name = "vault..eth"

        with pytest.raises(InvalidNameFormatError, match="empty"):
            NamingOrchestrator().name_contract(request)
        assert client.read_calls == []

    def test_unknown_chain(self):
        client = FakeChainClient(chain_id=999999)
        with pytest.raises(InvalidInputError, match="999999"):
            NamingOrchestrator().name_contract(request_for(client, None))

    def test_incomplete_primary_contracts(self, client):
        contracts = NetworkContractSet(registry=REGISTRY, resolver=RESOLVER)
        with pytest.raises(InvalidInputError, match="missing ENS"):
            NamingOrchestrator().name_contract(request_for(client, contracts))
        assert client.read_calls == []


class TestSecondaryNetwork:
    def test_forward_mirrored_and_reverse_set_on_l2(
        self, client, contracts, secondary_client, secondary_contracts
    ):
        configure_chain(client, contracts)
        secondary_client.set_read(CONTRACT, "owner", CALLER)

        outcome = NamingOrchestrator().name_contract(
            request_for(
                client,
                contracts,
                secondary_client=secondary_client,
                secondary_contracts=secondary_contracts,
            )
        )

        assert outcome.success
        assert set(outcome.transactions) == PRIMARY_STEPS | {
            "l2ForwardResolution",
            "l2ReverseResolution",
        }
        coin_write = client.writes_to(SET_ADDR_FOR_COIN)[0]
        assert coin_write.address == RESOLVER
        assert coin_write.args == [
            namehash(NAME),
            evm_coin_type(BASE_CHAIN_ID),
            bytes.fromhex(CONTRACT[2:]),
        ]
        assert [(w.address, w.args) for w in secondary_client.writes] == [
            (L2_REVERSE_REGISTRAR, [CHECKSUMMED_CONTRACT, NAME])
        ]

    def test_l2_reverse_failure_is_skipped(
        self, client, contracts, secondary_client, secondary_contracts
    ):
        configure_chain(client, contracts)

        outcome = NamingOrchestrator().name_contract(
            request_for(
                client,
                contracts,
                secondary_client=secondary_client,
                secondary_contracts=secondary_contracts,
            )
        )

        assert outcome.success
        assert "l2ForwardResolution" in outcome.transactions
        assert "l2ReverseResolution" not in outcome.transactions
        assert (
            outcome.results["l2ReverseResolution"].reason is SkipReason.SECONDARY_UNAVAILABLE
        )
        assert secondary_client.writes == []

    def test_secondary_contracts_resolved_from_chain_id(
        self, client, contracts, secondary_client
    ):
        configure_chain(client, contracts)
        secondary_client.set_read(CONTRACT, "owner", CALLER)

        outcome = NamingOrchestrator().name_contract(
            request_for(client, contracts, secondary_client=secondary_client)
        )

        # The built-in Base table has a coin type but no L2 reverse registrar.
        assert outcome.success
        assert client.writes_to(SET_ADDR_FOR_COIN)[0].args[1] == evm_coin_type(8453)
        assert (
            outcome.results["l2ReverseResolution"].reason is SkipReason.SECONDARY_UNAVAILABLE
        )

    def test_l2_forward_failure_is_fatal(
        self, client, contracts, secondary_client, secondary_contracts
    ):
        configure_chain(client, contracts)
        client.write_errors[(RESOLVER, SET_ADDR_FOR_COIN)] = ChainCallError("reverted")

        outcome = NamingOrchestrator().name_contract(
            request_for(
                client,
                contracts,
                secondary_client=secondary_client,
                secondary_contracts=secondary_contracts,
            )
        )

        assert not outcome.success
        assert outcome.failed_step == "l2ForwardResolution"
        assert set(outcome.transactions) == PRIMARY_STEPS
        assert secondary_client.read_calls == []

    def test_unreadable_secondary_chain_id_fails_the_mirror_step(self, client, contracts):
        class UnreachableChainClient(FakeChainClient):
            @property
            def chain_id(self):
                raise ConnectionError("l2 rpc unreachable")

        configure_chain(client, contracts)
        secondary_contracts = NetworkContractSet(l2_reverse_registrar=L2_REVERSE_REGISTRAR)

        outcome = NamingOrchestrator().name_contract(
            request_for(
                client,
                contracts,
                secondary_client=UnreachableChainClient(),
                secondary_contracts=secondary_contracts,
            )
        )

        assert not outcome.success
        assert outcome.failed_step == "l2ForwardResolution"
        assert isinstance(outcome.error, ChainCallError)
        assert set(outcome.transactions) == PRIMARY_STEPS
        assert client.writes_to(SET_ADDR_FOR_COIN) == []


class TestStateChanges:
    def test_states_visited_in_order(self, client, contracts):
        configure_chain(client, contracts)
        states = []

        NamingOrchestrator(on_state_change=states.append).name_contract(
            request_for(client, contracts)
        )

        assert states == [
            NamingState.DETECTING,
            NamingState.REGISTERING_SUBNAME,
            NamingState.SETTING_FORWARD,
            NamingState.SETTING_REVERSE,
            NamingState.DONE,
        ]

    def test_failure_ends_in_failed_state(self, client, contracts):
        configure_chain(client, contracts, owner=None)
        orchestrator = NamingOrchestrator()

        orchestrator.name_contract(request_for(client, contracts))

        assert orchestrator.state is NamingState.FAILED


class TestTelemetry:
    def test_disabled_by_default(self, client, contracts):
        configure_chain(client, contracts)
        telemetry = Mock()

        NamingOrchestrator(telemetry=telemetry).name_contract(request_for(client, contracts))

        telemetry.log_step.assert_not_called()

    def test_one_event_per_performed_step(self, client, contracts):
        configure_chain(client, contracts)
        telemetry = Mock()

        NamingOrchestrator(telemetry=telemetry).name_contract(
            request_for(client, contracts, enable_telemetry=True, correlation_id="co-42")
        )

        events = [call.args[0] for call in telemetry.log_step.call_args_list]
        assert [e.step for e in events] == [
            STEP_SUBNAME,
            STEP_FORWARD,
            STEP_REVERSE_SET_NAME_FOR_ADDR,
        ]
        assert {e.correlation_id for e in events} == {"co-42"}
        assert {e.op_type for e in events} == {"enscribe-nameexisting"}
        assert {e.chain_id for e in events} == {1}
        assert {e.sender_address for e in events} == {CALLER}

    def test_generated_correlation_id_shared_by_steps(self, client, contracts):
        configure_chain(client, contracts)
        telemetry = Mock()
        config = NamingConfig(enable_telemetry=True, op_type="deploy")

        NamingOrchestrator(config, telemetry=telemetry).name_contract(
            request_for(client, contracts)
        )

        events = [call.args[0] for call in telemetry.log_step.call_args_list]
        assert len(events) == 3
        assert len({e.correlation_id for e in events}) == 1
        assert events[0].correlation_id
        assert {e.op_type for e in events} == {"deploy"}

    def test_request_flag_overrides_config(self, client, contracts):
        configure_chain(client, contracts)
        telemetry = Mock()
        config = NamingConfig(enable_telemetry=True)

        NamingOrchestrator(config, telemetry=telemetry).name_contract(
            request_for(client, contracts, enable_telemetry=False)
        )

        telemetry.log_step.assert_not_called()

    def test_delivery_failure_does_not_fail_naming(self, client, contracts):
        configure_chain(client, contracts)
        network_client = Mock()
        network_client.post.side_effect = NetworkError(
            error_type=NetworkErrorType.TIMEOUT, message="Request timed out"
        )
        telemetry = TelemetryClient(network_client=network_client)

        outcome = NamingOrchestrator(telemetry=telemetry).name_contract(
            request_for(client, contracts, enable_telemetry=True)
        )

        assert outcome.success
        assert network_client.post.call_count == 3


class TestNameContractFunction:
    def test_one_call_entry_point(self, client, contracts):
        configure_chain(client, contracts)

        outcome = name_contract(NAME, CONTRACT, client, primary_contracts=contracts)

        assert outcome.success
        assert set(outcome.transactions) == PRIMARY_STEPS
