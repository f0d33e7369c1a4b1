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
Feed infra.

The pub-sub client interface and the bridges which relay its msgs
into the ui.

"""
from .feed import (
    Announced,
    Feed,
    FeedError,
    FeedTopic,
    MemoryFeed,
    Subscriber,
    SubscriptionOptions,
    Unannounced,
    Updated,
)
from .bridge import (
    UNSET_VALUE,
    ConnectionStatus,
    ConnectionStatusChanged,
    UpdateEvent,
    ValueChanged,
    open_bridges,
    open_update_channel,
    relay,
    stream_topics,
    stream_values,
)

__all__ = [
    'Announced',
    'ConnectionStatus',
    'ConnectionStatusChanged',
    'Feed',
    'FeedError',
    'FeedTopic',
    'MemoryFeed',
    'Subscriber',
    'SubscriptionOptions',
    'UNSET_VALUE',
    'Unannounced',
    'UpdateEvent',
    'Updated',
    'ValueChanged',
    'open_bridges',
    'open_update_channel',
    'relay',
    'stream_topics',
    'stream_values',
]
