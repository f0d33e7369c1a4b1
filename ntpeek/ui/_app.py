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

"""
Dashboard app state: live topic/value mirror, search picker lifecycle,
widget placement and the ui tick loop.

"""
from __future__ import annotations
from contextlib import asynccontextmanager as acm
from enum import Enum
from typing import (
    AsyncIterator,
    Callable,
    Optional,
)

import trio

from ..config import DashConfig
from ..log import get_logger
from ..types import Struct
from ..data.feed import Feed
from ..data.bridge import (
    ConnectionStatus,
    ConnectionStatusChanged,
    UpdateEvent,
    ValueChanged,
    open_bridges,
    open_update_channel,
)
from ._event import (
    BACKSPACE,
    DOWN,
    ENTER,
    ESC,
    UP,
    KeyboardMsg,
)
from ._search import SearchSession

log = get_logger(__name__)


class Window(Enum):
    MAIN = 'main'
    FUZZY_SEARCH = 'fuzzy_search'


class WidgetType(Enum):
    TEXT = 'text'


class GridPosition(Struct, frozen=True):
    row: int
    col: int


class Widget(Struct):
    topic: str
    label: str
    position: GridPosition
    widget_type: WidgetType = WidgetType.TEXT


def next_grid_position(
    widgets: list[Widget],
    rows: int = 4,
    cols: int = 4,

) -> GridPosition:
    '''
    First free cell in row-major order; once the grid is full keep
    cycling through it.

    '''
    ncells: int = rows * cols
    taken = {w.position for w in widgets}
    for i in range(ncells):
        pos = GridPosition(*divmod(i, cols))
        if pos not in taken:
            return pos

    return GridPosition(*divmod(len(widgets) % ncells, cols))


class UpdateConsumer:
    '''
    Owner of the canonical topic set, last value per topic and the
    feed connection status; only ever mutated from the ui task.

    '''
    def __init__(self) -> None:
        self.topics: set[str] = set()
        self.values: dict[str, str] = {}
        self.status: ConnectionStatus = ConnectionStatus.DISCONNECTED

        # set once all bridges have hung up their send sides
        self.closed: bool = False

    def apply(self, event: UpdateEvent) -> None:
        match event:
            case ValueChanged(
                topic=topic,
                value=value,
                announced=announced,
            ):
                self.topics.add(topic)
                if announced:
                    # announcements (from either bridge) never clobber
                    # an already observed value.
                    self.values.setdefault(topic, value)
                else:
                    self.values[topic] = value

            case ConnectionStatusChanged(status=status):
                if status is not self.status:
                    log.info(f'Feed is {status.value}')
                self.status = status

            case _:
                log.warning(f'Unknown update event: {event}')

    def drain(
        self,
        recv_chan: trio.MemoryReceiveChannel,
        picker: Optional[SearchSession] = None,

    ) -> int:
        '''
        Apply every update event which is ready without blocking and
        refresh the ``picker`` (if open) when anything arrived.

        Return the number of events applied.

        '''
        count: int = 0
        while True:
            try:
                event = recv_chan.receive_nowait()
            except trio.WouldBlock:
                break
            except (
                trio.EndOfChannel,
                trio.ClosedResourceError,
            ):
                self.closed = True
                break

            self.apply(event)
            count += 1

        if (
            count
            and picker is not None
        ):
            picker.refresh(self.topics)

        return count


class App:
    '''
    Dashboard ui state driven by key events and feed updates.

    '''
    def __init__(
        self,
        place: Optional[Callable[[list[Widget]], GridPosition]] = None,
        render: Optional[Callable[[App], None]] = None,
    ) -> None:
        self.mode: Window = Window.MAIN
        self.consumer = UpdateConsumer()
        self.session: Optional[SearchSession] = None
        self.widgets: list[Widget] = []
        self._place = place or next_grid_position
        self._render = render

    @classmethod
    def from_config(
        cls,
        conf: DashConfig,
        render: Optional[Callable[[App], None]] = None,

    ) -> App:
        rows, cols = conf.ui.grid_rows, conf.ui.grid_columns
        return cls(
            place=lambda widgets: next_grid_position(widgets, rows, cols),
            render=render,
        )

    def enter_fuzzy_search(self) -> None:
        self.mode = Window.FUZZY_SEARCH
        # initialize matches with all available topics
        self.session = SearchSession(self.consumer.topics)

    def exit_fuzzy_search(self) -> None:
        self.mode = Window.MAIN
        self.session = None

    def add_widget(self, widget: Widget) -> None:
        self.widgets.append(widget)

    def handle_search_selection(self) -> Optional[str]:
        '''
        Commit the picker's selection as a new text widget placed in
        the next free grid cell and close the picker.

        '''
        if self.session is None:
            return None

        topic = self.session.commit()
        if topic is None:
            return None

        self.add_widget(
            Widget(
                topic=topic,
                label=topic,
                position=self._place(self.widgets),
            )
        )
        log.info(f'Added widget for {topic}')
        self.exit_fuzzy_search()
        return topic

    def handle_key(
        self,
        msg: KeyboardMsg,

    ) -> Optional[str]:
        '''
        Process one key event, return the topic if one was committed.

        '''
        key, txt, ctl = msg.to_tuple()
        log.debug(f'key: {key}, ctl: {ctl}, txt: {txt!r}')

        if self.mode is Window.MAIN:
            if txt == '/':
                self.enter_fuzzy_search()
            return None

        session = self.session
        if key == ENTER:
            return self.handle_search_selection()

        # cancel and close
        elif (
            key == ESC
            or (ctl and key == 'c')
        ):
            self.exit_fuzzy_search()

        # selection navigation controls
        elif (
            key == UP
            or (ctl and key == 'k')
        ):
            session.move_cursor(-1)

        elif (
            key == DOWN
            or (ctl and key == 'j')
        ):
            session.move_cursor(1)

        elif key == BACKSPACE:
            session.delete_character()

        elif (
            not ctl
            and txt
            and txt.isprintable()
        ):
            session.type_character(txt)

        return None

    def tick(
        self,
        recv_chan: trio.MemoryReceiveChannel,
    ) -> int:
        count = self.consumer.drain(recv_chan, picker=self.session)
        if self._render:
            self._render(self)

        return count


async def run_ui_loop(
    app: App,
    recv_chan: trio.MemoryReceiveChannel,
    tick_period: float = 0.05,

) -> None:
    '''
    Drain feed updates into ``app`` once per tick until every bridge
    has hung up.

    '''
    while True:
        app.tick(recv_chan)
        if app.consumer.closed:
            log.debug('Update chan closed, stopping ui loop')
            return

        await trio.sleep(tick_period)


async def handle_keyboard_input(
    app: App,
    recv_chan: trio.abc.ReceiveChannel,
) -> None:
    async for msg in recv_chan:
        app.handle_key(msg)


@acm
async def open_dashboard(
    feed: Feed,
    conf: Optional[DashConfig] = None,
    key_stream: Optional[trio.abc.ReceiveChannel] = None,
    render: Optional[Callable[[App], None]] = None,

) -> AsyncIterator[App]:
    '''
    Start the feed bridges and the ui loop (plus key handling if
    a ``key_stream`` is passed) around a new ``App``.

    On exit the bridges are torn down first, the ui loop then drains
    whatever they relayed and returns.

    '''
    conf = conf or DashConfig()
    app = App.from_config(conf, render=render)
    send, recv = open_update_channel(conf.ui.channel_size)

    async with (
        recv,
        trio.open_nursery() as n,
    ):
        n.start_soon(
            run_ui_loop,
            app,
            recv,
            conf.ui.tick_period,
        )
        async with trio.open_nursery() as kbn:
            if key_stream is not None:
                kbn.start_soon(handle_keyboard_input, app, key_stream)

            async with open_bridges(
                feed,
                send,
                namespace=conf.feed.namespace,
                discovery_namespace=conf.feed.discovery_namespace,
            ):
                yield app

            kbn.cancel_scope.cancel()
