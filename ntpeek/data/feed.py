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
Pub-sub feed client interface and an in-process reference feed.

A "feed" is anything which can ``subscribe()`` to a topic namespace and
hand back a subscriber whose receive methods deliver the msg shapes
defined here. The actual network transport lives in the feed client,
all the rest of the stack only ever sees these msgs.

'''
from __future__ import annotations
from collections import deque
from typing import (
    Any,
    Protocol,
)

import trio

from ..types import Struct
from ..log import get_logger

log = get_logger(__name__)


class FeedError(Exception):
    '''
    A (presumed transient) failure receiving from a feed
    subscription.

    '''


class FeedTopic(Struct, frozen=True):
    name: str
    type_str: str = 'string'


class SubscriptionOptions(Struct, frozen=True):
    # match every topic whose name starts with the namespace
    prefix_match: bool = False

    # request every value change, not just the most recent
    all: bool = False

    # only deliver (un)announcements, no value payloads
    topics_only: bool = False


class Announced(Struct, frozen=True):
    topic: FeedTopic


class Unannounced(Struct, frozen=True):
    name: str


class Updated(Struct, frozen=True):
    topic: FeedTopic
    value: Any


FeedMsg = Announced | Unannounced | Updated


class Subscriber(Protocol):

    async def recv_latest(self) -> FeedMsg:
        '''
        Deliver the next msg coalescing buffered value updates such
        that only the most recent per topic is ever seen.

        '''
        ...

    async def recv_buffered(self) -> FeedMsg:
        '''
        Deliver the next buffered msg, nothing is coalesced.

        '''
        ...


class Feed(Protocol):

    async def subscribe(
        self,
        namespace: str,
        options: SubscriptionOptions,
    ) -> Subscriber:
        ...


def _coalesce(
    buffer: deque[FeedMsg | FeedError],

) -> deque[FeedMsg | FeedError]:
    '''
    Drop every ``Updated`` for which a later ``Updated`` of the same
    topic is buffered; everything else keeps its order.

    '''
    seen: set[str] = set()
    kept: list[FeedMsg | FeedError] = []
    for msg in reversed(buffer):
        if isinstance(msg, Updated):
            if msg.topic.name in seen:
                continue
            seen.add(msg.topic.name)

        kept.append(msg)

    kept.reverse()
    return deque(kept)


class MemorySubscriber:
    '''
    Subscription handle on a ``MemoryFeed``; msgs are buffered
    until received.

    '''
    def __init__(
        self,
        namespace: str,
        options: SubscriptionOptions,
    ) -> None:
        self.namespace = namespace
        self.options = options
        self._buffer: deque[FeedMsg | FeedError] = deque()
        self._ready = trio.Event()

    def matches(self, name: str) -> bool:
        if self.options.prefix_match:
            return name.startswith(self.namespace)

        return name == self.namespace

    def push(self, msg: FeedMsg | FeedError) -> None:
        if (
            isinstance(msg, Updated)
            and self.options.topics_only
        ):
            return

        self._buffer.append(msg)
        self._ready.set()

    async def _wait(self) -> None:
        if self._buffer:
            await trio.lowlevel.checkpoint()

        while not self._buffer:
            self._ready = trio.Event()
            await self._ready.wait()

    def _pop(self) -> FeedMsg:
        msg = self._buffer.popleft()
        if isinstance(msg, FeedError):
            raise msg

        return msg

    async def recv_latest(self) -> FeedMsg:
        await self._wait()
        self._buffer = _coalesce(self._buffer)
        return self._pop()

    async def recv_buffered(self) -> FeedMsg:
        await self._wait()
        return self._pop()


class MemoryFeed:
    '''
    In-process feed: publishers call the (sync) ``announce()``,
    ``unannounce()``, ``publish()`` and ``fail()`` methods from the
    same ``trio`` thread the subscribers are received on.

    '''
    def __init__(self) -> None:
        self.topics: dict[str, FeedTopic] = {}
        self.values: dict[str, Any] = {}
        self._subs: list[MemorySubscriber] = []

    async def subscribe(
        self,
        namespace: str,
        options: SubscriptionOptions = SubscriptionOptions(),

    ) -> MemorySubscriber:
        sub = MemorySubscriber(namespace, options)
        self._subs.append(sub)

        # a new subscriber is told about everything already published
        for name, topic in self.topics.items():
            if sub.matches(name):
                sub.push(Announced(topic))
                if name in self.values:
                    sub.push(Updated(topic, self.values[name]))

        log.debug(f'New subscription to {namespace!r}: {options}')
        return sub

    def _fanout(
        self,
        name: str,
        msg: FeedMsg,
    ) -> None:
        for sub in self._subs:
            if sub.matches(name):
                sub.push(msg)

    def announce(
        self,
        name: str,
        type_str: str = 'string',

    ) -> FeedTopic:
        topic = self.topics.get(name)
        if topic is None:
            topic = self.topics[name] = FeedTopic(name, type_str)
            self._fanout(name, Announced(topic))

        return topic

    def unannounce(self, name: str) -> None:
        if self.topics.pop(name, None) is not None:
            self.values.pop(name, None)
            self._fanout(name, Unannounced(name))

    def publish(
        self,
        name: str,
        value: Any,
    ) -> None:
        topic = self.announce(name)
        self.values[name] = value
        self._fanout(name, Updated(topic, value))

    def fail(
        self,
        err: FeedError | None = None,
    ) -> None:
        '''
        Inject a receive error into every subscription.

        '''
        err = err or FeedError('feed hiccup')
        for sub in self._subs:
            sub.push(err)
