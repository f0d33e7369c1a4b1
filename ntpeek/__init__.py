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
ntpeek: browse live pub-sub topics from your terminal.

'''
from .data.feed import MemoryFeed
from .ui._app import open_dashboard

__all__ = [
    'MemoryFeed',
    'open_dashboard',
]
