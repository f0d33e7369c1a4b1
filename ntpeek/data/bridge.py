# ntpeek: live topic browsing for hackers
# Copyright (C) 2024-present  ntpeek contributors

# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.

# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

'''
Feed -> UI subscription bridges.

Each bridge is a long running ``trio`` task which subscribes to a
namespace on a feed, translates every received msg into an update
event and relays it over a mem chan to the (single) UI consumer task.
Bridges own no UI state; the mem chan is the only thing shared.

'''
from __future__ import annotations
from contextlib import asynccontextmanager as acm
from enum import Enum
from typing import AsyncIterator

import trio

from ..types import Struct
from ..log import get_logger
from .feed import (
    Announced,
    Feed,
    FeedError,
    Subscriber,
    SubscriptionOptions,
    Unannounced,
    Updated,
)

log = get_logger(__name__)

# value relayed for a topic which is known but hasn't
# had a value observed (yet).
UNSET_VALUE: str = 'None'


class ConnectionStatus(Enum):
    DISCONNECTED = 'disconnected'
    CONNECTED = 'connected'


class ValueChanged(Struct, frozen=True):
    topic: str
    value: str

    # set only for topic announcements, which carry ``UNSET_VALUE``
    # and must never replace an observed value.
    announced: bool = False


class ConnectionStatusChanged(Struct, frozen=True):
    status: ConnectionStatus


UpdateEvent = ValueChanged | ConnectionStatusChanged


def open_update_channel(
    size: int = 1024,

) -> tuple[trio.MemorySendChannel, trio.MemoryReceiveChannel]:
    '''
    Open the bridge -> ui hand-off mem chan.

    Each bridge should be handed its own ``.clone()`` of the send side
    so that the receiver sees end-of-channel only once all of them
    close.

    '''
    return trio.open_memory_channel(size)


def relay(
    send_chan: trio.MemorySendChannel,
    event: UpdateEvent,

) -> bool:
    '''
    Fire-and-forget send of ``event`` to the ui consumer.

    A closed or broken chan means the ui side is shutting down and
    a full one means it's lagging; in both cases the event is dropped.

    '''
    try:
        send_chan.send_nowait(event)
        return True

    except (
        trio.BrokenResourceError,
        trio.ClosedResourceError,
    ):
        # receiver hung up, normal teardown
        pass

    except trio.WouldBlock:
        log.debug(f'UI chan full, dropping {event}')

    return False


async def _open_subscription(
    feed: Feed,
    namespace: str,
    options: SubscriptionOptions,
    send_chan: trio.MemorySendChannel,

) -> Subscriber | None:
    try:
        sub = await feed.subscribe(namespace, options)
    except FeedError:
        log.exception(f'Failed to subscribe to {namespace!r}')
        relay(
            send_chan,
            ConnectionStatusChanged(ConnectionStatus.DISCONNECTED),
        )
        return None

    # if we're subscribed successfully, mark as connected
    relay(
        send_chan,
        ConnectionStatusChanged(ConnectionStatus.CONNECTED),
    )
    return sub


async def stream_values(
    feed: Feed,
    send_chan: trio.MemorySendChannel,
    namespace: str = '/',

    task_status: trio.TaskStatus = trio.TASK_STATUS_IGNORED,

) -> None:
    '''
    Relay live values for every topic under ``namespace``.

    Only the latest buffered value per topic is received on each
    iteration; intermediate updates are skipped in favour of
    freshness.

    '''
    async with send_chan:
        sub = await _open_subscription(
            feed,
            namespace,
            SubscriptionOptions(prefix_match=True),
            send_chan,
        )
        task_status.started(sub)
        if sub is None:
            return

        try:
            while True:
                try:
                    msg = await sub.recv_latest()
                except FeedError as err:
                    log.warning(
                        f'Value stream for {namespace!r} errored: {err!r}'
                    )
                    continue

                match msg:
                    case Announced(topic=topic):
                        log.info(f'Announced topic: {topic.name}')
                        relay(
                            send_chan,
                            ValueChanged(
                                topic.name,
                                UNSET_VALUE,
                                announced=True,
                            ),
                        )

                    case Updated(topic=topic, value=value):
                        relay(
                            send_chan,
                            ValueChanged(topic.name, str(value).strip()),
                        )
        finally:
            relay(
                send_chan,
                ConnectionStatusChanged(ConnectionStatus.DISCONNECTED),
            )


async def stream_topics(
    feed: Feed,
    send_chan: trio.MemorySendChannel,
    namespace: str = '/',

    task_status: trio.TaskStatus = trio.TASK_STATUS_IGNORED,

) -> None:
    '''
    Relay topic announcements for namespace discovery.

    Every buffered msg is received, a dropped announcement would mean
    a topic that can never be found in the search picker.

    '''
    async with send_chan:
        sub = await _open_subscription(
            feed,
            namespace,
            SubscriptionOptions(
                prefix_match=True,
                all=True,
                topics_only=True,
            ),
            send_chan,
        )
        task_status.started(sub)
        if sub is None:
            return

        try:
            while True:
                try:
                    msg = await sub.recv_buffered()
                except FeedError as err:
                    log.warning(
                        f'Topics stream for {namespace!r} errored: {err!r}'
                    )
                    continue

                match msg:
                    case Announced(topic=topic):
                        log.info(f'Announced topic: {topic.name}')
                        relay(
                            send_chan,
                            ValueChanged(
                                topic.name,
                                UNSET_VALUE,
                                announced=True,
                            ),
                        )

                    # TODO: relay a removal event once the ui can drop
                    # topics (and any widgets showing them).
                    case Unannounced(name=name):
                        log.info(f'Unannounced topic: {name}')
        finally:
            relay(
                send_chan,
                ConnectionStatusChanged(ConnectionStatus.DISCONNECTED),
            )


@acm
async def open_bridges(
    feed: Feed,
    send_chan: trio.MemorySendChannel,
    namespace: str = '/',
    discovery_namespace: str = '/',

) -> AsyncIterator[trio.Nursery]:
    '''
    Spawn both the value and discovery bridges, each relaying over
    its own clone of ``send_chan``, and cancel them on exit.

    The passed ``send_chan`` stays open for the life of the block and
    is closed on exit along with both (cancelled) bridges' clones,
    such that the ui side sees end-of-channel after teardown.

    '''
    async with (
        send_chan,
        trio.open_nursery() as n,
    ):
        await n.start(
            stream_values,
            feed,
            send_chan.clone(),
            namespace,
        )
        await n.start(
            stream_topics,
            feed,
            send_chan.clone(),
            discovery_namespace,
        )
        yield n
        n.cancel_scope.cancel()
