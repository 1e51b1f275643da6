"""Entry point walking a manager through a simulated wallet session."""

from __future__ import annotations

import argparse
import asyncio
import logging
from typing import Any, Dict, Optional, Sequence

from .connectors import InjectedConnector
from .event_dispatcher import EventDispatcher
from .manager import EMPTY_ACCOUNTS_POLICIES, Web3Manager
from .settings import ManagerSettings
from .simulated_provider import SimulatedProvider
from .transition_history import TransitionHistory


LOGGER = logging.getLogger(__name__)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    settings = ManagerSettings.from_env()
    parser = argparse.ArgumentParser(description="web3-manager simulated session")
    parser.add_argument(
        "--library",
        default=settings.library_name,
        help="Library flavour requested from the connector",
    )
    parser.add_argument(
        "--empty-accounts-policy",
        default=settings.empty_accounts_policy,
        choices=sorted(EMPTY_ACCOUNTS_POLICIES),
        help="How an empty accountsChanged notification is applied",
    )
    parser.add_argument(
        "--history-size",
        type=int,
        default=settings.history_size,
        help="Number of transitions kept in the history",
    )
    parser.add_argument(
        "--queue-size",
        type=int,
        default=settings.queue_size,
        help="Default size of dispatcher subscriber queues",
    )
    parser.add_argument(
        "--overflow-strategy",
        default=settings.overflow_strategy,
        choices=["drop_new", "drop_oldest"],
        help="What happens when a subscriber queue is full",
    )
    parser.add_argument(
        "--chain-id",
        type=int,
        default=1,
        help="Chain id reported by the simulated provider",
    )
    parser.add_argument(
        "--account",
        default="0x0000000000000000000000000000000000000abc",
        help="Account exposed by the simulated provider",
    )
    parser.add_argument(
        "--log-level",
        default="DEBUG" if settings.debug else settings.log_level,
        help="Root logging level",
    )
    return parser.parse_args(argv)


async def run(args: argparse.Namespace) -> Dict[str, Any]:
    dispatcher = EventDispatcher(
        default_queue_size=args.queue_size,
        overflow_strategy=args.overflow_strategy,
    )
    history = TransitionHistory(max_records=args.history_size)
    provider = SimulatedProvider(accounts=[args.account], chain_id=args.chain_id, is_meta_mask=True)
    manager = Web3Manager(
        {"injected": InjectedConnector(provider)},
        args.library,
        empty_accounts_policy=args.empty_accounts_policy,
        dispatcher=dispatcher,
        history=history,
    )
    queue = dispatcher.register_queue("state_changed", subscriber_id="demo")

    await manager.set_connector("injected", suppress_global_error=False)
    LOGGER.info("Connected: initialized=%s state=%s", manager.initialized, manager.state.to_payload())

    provider.simulate_network_changed(args.chain_id + 1)
    provider.simulate_accounts_changed(["0x0000000000000000000000000000000000000def"])
    manager.rerenderers.force_network_rerender()
    LOGGER.info("After provider events: %s", manager.state.to_payload())

    provider.simulate_accounts_changed([])
    LOGGER.info(
        "After empty account list: initialized=%s state=%s",
        manager.initialized,
        manager.state.to_payload(),
    )

    manager.unset_connector()
    manager.close()

    while not queue.empty():
        message = queue.get_nowait()
        LOGGER.info("state_changed: %s", message["data"])

    dispatcher.unregister_queue("state_changed", queue)
    LOGGER.info("Dispatcher metrics snapshot: %s", dispatcher.metrics_snapshot())
    LOGGER.info("Transition history: %s", [entry["action"] for entry in history.history()])

    return {
        "state": manager.state.to_payload(),
        "rerenderers": {
            "network": manager.rerenderers.network_rerenderer,
            "account": manager.rerenderers.account_rerenderer,
        },
        "metrics": dispatcher.metrics_snapshot(),
        "history": history.history(),
    }


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    asyncio.run(run(args))


if __name__ == "__main__":
    main()
