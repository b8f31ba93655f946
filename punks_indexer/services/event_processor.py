"""Event processor for the CryptoPunks market contract"""
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, Optional, Type

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from punks_indexer.config import Settings
from punks_indexer.models.event import EventType
from punks_indexer.models.market import Bid
from punks_indexer.models.transfer import Transfer
from punks_indexer.schemas.events import (
    ZERO_ADDRESS,
    Assign,
    EventRecord,
    PunkBidEntered,
    PunkBidWithdrawn,
    PunkBought,
    PunkNoLongerForSale,
    PunkOffered,
    PunkTransfer,
    RawTransfer,
)
from punks_indexer.services.book import (
    close_bid,
    open_bid,
    open_listing,
    set_punk_no_longer_for_sale,
)
from punks_indexer.services.buckets import SnapshotPolicy
from punks_indexer.services.event_log import record_event
from punks_indexer.services.floor import lower_floor_for_offer, recompute_floor
from punks_indexer.services.ledger import (
    get_or_create_account,
    get_or_create_punk,
    update_ownership,
)
from punks_indexer.services.pricing import PriceOracle, StaticPriceOracle
from punks_indexer.services.ranking import consider_bid, consider_sale
from punks_indexer.services.snapshots import (
    add_active_listing,
    get_or_create_state,
    remove_active_listing,
)
from punks_indexer.services.store import EntityStore

logger = structlog.get_logger()


@dataclass(frozen=True)
class MarketConfig:
    """Addresses and snapshot policy the handlers depend on."""
    wrapper_address: str
    zero_address: str = ZERO_ADDRESS
    policy: SnapshotPolicy = field(default_factory=SnapshotPolicy)

    @classmethod
    def from_settings(cls, settings: Settings) -> "MarketConfig":
        return cls(
            wrapper_address=settings.wrapper_address.lower(),
            zero_address=settings.zero_address.lower(),
            policy=SnapshotPolicy(
                bucket_seconds=settings.bucket_seconds,
                lookback_limit=settings.snapshot_lookback_limit,
                floor_min_listings=settings.floor_min_listings,
            ),
        )


Handler = Callable[[EntityStore, EventRecord], Awaitable[None]]


class EventProcessor:
    """
    Applies decoded market events to the ledger, book and snapshots.

    One event is handled to completion before the next; every handler reads
    current entities, mutates them and appends to the event log:
    - Assign, PunkTransfer: ownership changes
    - PunkOffered, PunkNoLongerForSale: listings and the floor
    - PunkBidEntered, PunkBidWithdrawn: bids and the top bid
    - PunkBought: sales, volume and the top sale
    - Transfer: recorded for correlating sales inside a transaction
    """

    def __init__(self, config: MarketConfig, oracle: Optional[PriceOracle] = None):
        self.config = config
        self.oracle = oracle or StaticPriceOracle()
        self._handlers: Dict[Type[EventRecord], Handler] = {
            Assign: self._handle_assign,
            RawTransfer: self._handle_transfer,
            PunkTransfer: self._handle_punk_transfer,
            PunkOffered: self._handle_punk_offered,
            PunkBidEntered: self._handle_punk_bid_entered,
            PunkBidWithdrawn: self._handle_punk_bid_withdrawn,
            PunkBought: self._handle_punk_bought,
            PunkNoLongerForSale: self._handle_punk_no_longer_for_sale,
        }

    @property
    def policy(self) -> SnapshotPolicy:
        return self.config.policy

    async def process_event(self, session: AsyncSession, event: EventRecord) -> Optional[str]:
        """
        Apply one event inside the caller's session.
        Returns the event kind handled, or None for an unknown record type.
        """
        handler = self._handlers.get(type(event))
        if handler is None:
            logger.warning("No handler for event", type=type(event).__name__, id=event.event_id)
            return None

        await handler(EntityStore(session), event)
        kind = getattr(event, "kind", type(event).__name__)
        logger.debug(
            "Processed event",
            kind=kind,
            id=event.event_id,
            block=event.block_number,
        )
        return kind

    def _usd(self, event: EventRecord) -> int:
        return self.oracle.usd_value(event.block_timestamp, event.block_number)

    # Event handlers

    async def _handle_assign(self, store: EntityStore, event: Assign) -> None:
        """Initial claim of a punk"""
        zero = self.config.zero_address
        punk_id = str(event.punk_index)

        await get_or_create_account(store, zero)
        to_account = await get_or_create_account(store, event.to_address)

        await record_event(
            store,
            event,
            EventType.CLAIMED,
            punk_id,
            from_account=zero,
            to_account=to_account.id,
            value=0,
            usd=self._usd(event),
        )

        await update_ownership(
            store,
            self.policy,
            event.transaction_hash,
            event.block_timestamp,
            punk_id,
            to_account.id,
            zero,
            zero_address=zero,
        )

    async def _handle_transfer(self, store: EntityStore, event: RawTransfer) -> None:
        """Remember the raw transfer so a delisting in the same tx reads as a sale"""
        transfer = await store.load(Transfer, event.transaction_hash)
        if transfer is None:
            transfer = Transfer(id=event.transaction_hash)
        transfer.from_address = event.from_address
        transfer.to_address = event.to_address
        transfer.transaction_hash = event.transaction_hash
        await store.save(transfer)

    async def _handle_punk_transfer(self, store: EntityStore, event: PunkTransfer) -> None:
        """Direct transfer, including wrapping and unwrapping"""
        punk_id = str(event.punk_index)
        wrapper = self.config.wrapper_address

        from_account = await get_or_create_account(store, event.from_address)
        to_account = await get_or_create_account(store, event.to_address)

        is_wrapped = to_account.id == wrapper
        is_unwrapped = from_account.id == wrapper
        punk = await get_or_create_punk(store, punk_id, self.config.zero_address)
        punk.wrapped = is_wrapped
        await store.save(punk)

        new_owner_is_bidder = False
        bid = await store.load(Bid, punk_id)
        if bid is not None and bid.from_account.lower() == to_account.id.lower():
            new_owner_is_bidder = True

        await set_punk_no_longer_for_sale(store, punk_id, remove_bid=new_owner_is_bidder)

        if is_wrapped:
            event_type = EventType.WRAPPED
        elif is_unwrapped:
            event_type = EventType.UNWRAPPED
        else:
            event_type = EventType.TRANSFERRED

        usd = self._usd(event)
        await record_event(
            store,
            event,
            event_type,
            punk_id,
            from_account=from_account.id,
            to_account=to_account.id,
            value=0,
            usd=usd,
        )

        state = await get_or_create_state(store, event.block_timestamp, self.policy)
        remove_active_listing(state, punk_id)
        await recompute_floor(store, state, self.policy)
        state.usd = usd
        await store.save(state)

        await update_ownership(
            store,
            self.policy,
            event.transaction_hash,
            event.block_timestamp,
            punk_id,
            to_account.id,
            from_account.id,
            zero_address=self.config.zero_address,
        )

    async def _handle_punk_bought(self, store: EntityStore, event: PunkBought) -> None:
        """Completed sale, either to an offer or by accepting a bid"""
        zero = self.config.zero_address
        punk_id = str(event.punk_index)

        from_account = await get_or_create_account(store, event.from_address)
        buyer = event.to_address
        value = event.value

        bid = await store.load(Bid, punk_id)
        has_bid = bid is not None

        # The contract reports a zero buyer when a bid is accepted; the
        # standing bid names the real buyer and price.
        if buyer == zero:
            if bid is not None:
                buyer = bid.from_account
                value = bid.value
            remove_bid = True
        elif bid is not None and bid.from_account.lower() == buyer.lower():
            remove_bid = True
        else:
            remove_bid = False

        await set_punk_no_longer_for_sale(store, punk_id, remove_bid=remove_bid)

        to_account = await get_or_create_account(store, buyer)
        await update_ownership(
            store,
            self.policy,
            event.transaction_hash,
            event.block_timestamp,
            punk_id,
            to_account.id,
            from_account.id,
            zero_address=zero,
        )

        state = await get_or_create_state(store, event.block_timestamp, self.policy)
        remove_active_listing(state, punk_id)
        await recompute_floor(store, state, self.policy)

        if not has_bid and value == 0:
            await store.save(state)
            logger.info("Ignoring zero-value sale", punk=punk_id, tx=event.transaction_hash)
            return

        usd = self._usd(event)
        sale = await record_event(
            store,
            event,
            EventType.SALE,
            punk_id,
            from_account=from_account.id,
            to_account=to_account.id,
            value=value,
            usd=usd,
        )

        await consider_sale(store, state, sale.id, value)
        state.sales += 1
        state.volume += value
        state.usd = usd
        await store.save(state)

    async def _handle_punk_offered(self, store: EntityStore, event: PunkOffered) -> None:
        """New or replaced offer to sell"""
        punk_id = str(event.punk_index)

        from_account = await get_or_create_account(store, event.transaction_from)
        to_account = await get_or_create_account(store, event.to_address)
        await get_or_create_punk(store, punk_id, self.config.zero_address)

        usd = self._usd(event)
        listing = await open_listing(
            store,
            punk_id,
            value=event.min_value,
            usd=usd,
            offerer=from_account.id,
            meta=event,
            restricted_buyer=to_account.id,
            zero_address=self.config.zero_address,
        )

        await record_event(
            store,
            event,
            EventType.OFFERED,
            punk_id,
            from_account=from_account.id,
            to_account=to_account.id,
            value=event.min_value,
            usd=usd,
        )

        state = await get_or_create_state(store, event.block_timestamp, self.policy)
        state.listings += 1
        add_active_listing(state, punk_id)
        lower_floor_for_offer(state, event.min_value, listing.is_private)
        state.usd = usd
        await store.save(state)

    async def _handle_punk_bid_entered(self, store: EntityStore, event: PunkBidEntered) -> None:
        """New bid; replaces any standing bid on the punk"""
        zero = self.config.zero_address
        punk_id = str(event.punk_index)

        from_account = await get_or_create_account(store, event.from_address)
        await get_or_create_punk(store, punk_id, self.config.zero_address)

        usd = self._usd(event)
        await open_bid(store, punk_id, event.value, usd, from_account.id, event)

        bid_event = await record_event(
            store,
            event,
            EventType.BID_ENTERED,
            punk_id,
            from_account=from_account.id,
            to_account=zero,
            value=event.value,
            usd=usd,
        )

        state = await get_or_create_state(store, event.block_timestamp, self.policy)
        await consider_bid(store, state, bid_event.id, event.value)
        state.bids += 1
        state.usd = usd
        await store.save(state)

    async def _handle_punk_bid_withdrawn(self, store: EntityStore, event: PunkBidWithdrawn) -> None:
        """Bid withdrawn; the period bid counter is not decremented"""
        punk_id = str(event.punk_index)

        from_account = await get_or_create_account(store, event.from_address)
        await close_bid(store, punk_id)

        await record_event(
            store,
            event,
            EventType.BID_WITHDRAWN,
            punk_id,
            from_account=from_account.id,
            to_account=self.config.zero_address,
            value=event.value,
            usd=self._usd(event),
        )

    async def _handle_punk_no_longer_for_sale(
        self,
        store: EntityStore,
        event: PunkNoLongerForSale,
    ) -> None:
        """Offer withdrawn, unless a raw transfer in the same tx marks it as a sale"""
        zero = self.config.zero_address
        punk_id = str(event.punk_index)

        await set_punk_no_longer_for_sale(store, punk_id)

        is_buy = False
        transfer = await store.load(Transfer, event.transaction_hash)
        if transfer is not None:
            transfer.token_id = punk_id
            await store.save(transfer)
            is_buy = True

        usd = self._usd(event)
        state = await get_or_create_state(store, event.block_timestamp, self.policy)

        if not is_buy:
            await record_event(
                store,
                event,
                EventType.OFFER_WITHDRAWN,
                punk_id,
                from_account=zero,
                to_account=zero,
                value=0,
                usd=usd,
            )
            state.delistings += 1

        remove_active_listing(state, punk_id)
        await recompute_floor(store, state, self.policy)
        state.usd = usd
        await store.save(state)
