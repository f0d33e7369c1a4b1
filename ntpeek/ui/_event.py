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
Keyboard event msgs relayed to async handlers over ``trio`` mem chans.

"""
from ..types import Struct


# named (non-printable) keys, anything else is a single char in
# ``.txt``.
ENTER: str = 'enter'
ESC: str = 'esc'
BACKSPACE: str = 'backspace'
UP: str = 'up'
DOWN: str = 'down'


class KeyboardMsg(Struct, frozen=True):
    '''
    Unpacked terminal/gui keyboard event data.

    '''
    key: str
    txt: str = ''
    ctl: bool = False

    def to_tuple(self) -> tuple:
        return tuple(self.to_dict().values())

    @classmethod
    def from_char(
        cls,
        char: str,
        ctl: bool = False,

    ) -> 'KeyboardMsg':
        return cls(
            key=char.lower(),
            txt='' if ctl else char,
            ctl=ctl,
        )
