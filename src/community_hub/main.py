"""Main entry point for the community hub."""

import asyncio
import logging
import sys

from community_hub.adapters.config import AppConfig
from community_hub.adapters.persistence import (
    MemoryCallLogStore,
    MemoryLabourStore,
    MemoryLoanStore,
    MemoryMessageStore,
    MemoryPostStore,
    MemoryTransactionStore,
)
from community_hub.adapters.presence import ConnectionRegistry
from community_hub.adapters.realtime import (
    SocketIOEmitter,
    SocketIOHubHandlers,
    create_socketio_server,
)
from community_hub.adapters.web import CommunityHttpApi, HubWebServer
from community_hub.adapters.web.pollers import StaleConnectionSweeper
from community_hub.application.services import (
    CallSignalingCoordinator,
    EventRelay,
    HubDispatcher,
    LabourSlots,
    LoanClaims,
    PresenceLifecycle,
    VoteCounter,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stderr,
)

logger = logging.getLogger(__name__)


def build_server(config: AppConfig) -> HubWebServer:
    """Wire the hub components together and return the web server."""
    registry = ConnectionRegistry()
    post_store = MemoryPostStore()
    labour_store = MemoryLabourStore()
    loan_store = MemoryLoanStore()
    call_log_store = MemoryCallLogStore()
    message_store = MemoryMessageStore()
    transaction_store = MemoryTransactionStore()

    sio = create_socketio_server(config)
    emitter = SocketIOEmitter(sio)

    calls = CallSignalingCoordinator(
        registry,
        emitter,
        call_log_store=call_log_store,
        ring_timeout_seconds=config.ring_timeout_seconds,
    )
    dispatcher = HubDispatcher(
        PresenceLifecycle(registry, emitter),
        EventRelay(registry, emitter, message_store=message_store),
        calls,
    )
    SocketIOHubHandlers(sio, dispatcher, emitter).register()

    http_api = CommunityHttpApi(
        registry=registry,
        post_store=post_store,
        labour_store=labour_store,
        loan_store=loan_store,
        call_log_store=call_log_store,
        message_store=message_store,
        transaction_store=transaction_store,
        votes=VoteCounter(post_store),
        labour_slots=LabourSlots(labour_store, emitter=emitter),
        loan_claims=LoanClaims(loan_store),
        call_log_limit=config.call_log_limit,
        labour_posts_limit=config.labour_posts_limit,
        feed_posts_limit=config.feed_posts_limit,
        chat_history_limit=config.chat_history_limit,
        loans_limit=config.loans_limit,
        transactions_limit=config.transactions_limit,
        starting_balance=config.starting_balance,
    )
    sweeper = StaleConnectionSweeper(
        dispatcher, emitter, interval_seconds=config.stale_sweep_interval_seconds
    )
    return HubWebServer(
        config,
        sio,
        http_api,
        sweeper=sweeper,
        shutdown_hooks=[calls.shutdown],
    )


async def main() -> None:
    """Main application entry point."""
    config = AppConfig()
    logging.getLogger().setLevel(config.log_level)

    server = build_server(config)
    try:
        await server.start()
    except KeyboardInterrupt:
        logger.info("Shutting down...")
        await server.stop()


def run() -> None:
    """Console script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
