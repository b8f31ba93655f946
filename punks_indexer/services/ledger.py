"""Punk ownership ledger"""
from typing import List

import structlog

from punks_indexer.models.account import Account, Punk
from punks_indexer.models.state import State
from punks_indexer.schemas.events import ZERO_ADDRESS
from punks_indexer.services.buckets import SnapshotPolicy
from punks_indexer.services.snapshots import get_or_create_state
from punks_indexer.services.store import EntityStore

logger = structlog.get_logger()


async def get_or_create_account(store: EntityStore, address: str) -> Account:
    """Load an account, creating an empty one on first reference"""
    account = await store.load(Account, address)
    if account is None:
        account = Account(id=address, punks=[])
        await store.save(account)
    return account


async def get_or_create_punk(
    store: EntityStore,
    punk_id: str,
    zero_address: str = ZERO_ADDRESS,
) -> Punk:
    """Load a punk, creating an unowned, unwrapped one on first reference"""
    punk = await store.load(Punk, punk_id)
    if punk is None:
        punk = Punk(id=punk_id, owner=zero_address, wrapped=False)
        await store.save(punk)
    return punk


async def _release(store: EntityStore, state: State, account: Account, punk_id: str) -> List[str]:
    """Drop ``punk_id`` from the holdings; the account stops counting as an owner once empty"""
    punks = list(account.punks or [])
    if punk_id in punks:
        punks = [i for i in punks if i != punk_id]
        if not punks:
            state.owners -= 1
        account.punks = punks
        await store.save(account)
    return punks


async def update_ownership(
    store: EntityStore,
    policy: SnapshotPolicy,
    transaction_hash: str,
    block_timestamp: int,
    punk_id: str,
    to_address: str,
    from_address: str,
    zero_address: str = ZERO_ADDRESS,
) -> None:
    """
    Move ``punk_id`` from ``from_address`` to ``to_address``.

    The snapshot owner count drops when the sender is left holding nothing and
    rises when the receiver held nothing before. A recorded holder other than
    the sender (a claim re-assigning a punk reports the zero address) is
    released as well, so no two accounts ever hold the same punk.
    """
    punk = await get_or_create_punk(store, punk_id, zero_address)
    from_account = await get_or_create_account(store, from_address)
    to_account = await get_or_create_account(store, to_address)
    state = await get_or_create_state(store, block_timestamp, policy)

    from_punks = await _release(store, state, from_account, punk_id)

    if punk.owner != from_account.id:
        holder = await store.load(Account, punk.owner)
        if holder is not None:
            await _release(store, state, holder, punk_id)

    # Same object as from_account on a self-transfer.
    to_punks = list(to_account.punks or [])
    if not to_punks:
        state.owners += 1
    if punk_id not in to_punks:
        to_punks.append(punk_id)
    to_account.punks = to_punks
    await store.save(to_account)
    await store.save(state)

    punk.owner = to_account.id
    await store.save(punk)

    logger.debug(
        "Ownership updated",
        tx=transaction_hash,
        punk=punk_id,
        to=to_address,
        to_punks=len(to_punks),
        from_=from_address,
        from_punks=len(from_punks),
        owners=state.owners,
    )
