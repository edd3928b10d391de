# -*- coding: utf-8 -*-
#
# GPL License and Copyright Notice ============================================
#  This file is part of Trilogy Save Editor.
#
#  Trilogy Save Editor is free software: you can redistribute it and/or
#  modify it under the terms of the GNU General Public License
#  as published by the Free Software Foundation, either version 3
#  of the License, or (at your option) any later version.
#
#  Trilogy Save Editor is distributed in the hope that it will be useful,
#  but WITHOUT ANY WARRANTY; without even the implied warranty of
#  MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
#  GNU General Public License for more details.
#
#  You should have received a copy of the GNU General Public License
#  along with Trilogy Save Editor.  If not, see <https://www.gnu.org/licenses/>.
#
#  Trilogy Save Editor copyright (C) 2021-2023 Trilogy Save Editor Team
#
# =============================================================================
"""Houses very low-level classes for reading and writing bytes in save
files."""
from __future__ import annotations

import io
import os

# no local imports beyond this, imported everywhere in brec
from .. import bolt
from ..bolt import decoder, structs_cache
from ..exception import SaveReadError, SaveSizeError

_int32 = structs_cache['<i']
_uint32 = structs_cache['<I']
_uint8 = structs_cache['<B']
_float = structs_cache['<f']

#------------------------------------------------------------------------------
class SaveReader(object):
    """Forward reader over the fully loaded contents of a save file.
    Will throw a SaveReadError if a read operation would go past the end of
    the buffer. The offset never exceeds the buffer size."""
    __slots__ = ('in_name', '_data', '_pos', 'size')

    def __init__(self, in_name, data: bytes):
        self.in_name = in_name
        self._data = bytes(data)
        self._pos = 0
        self.size = len(self._data)

    def __repr__(self):
        return f'{type(self).__name__}({self.in_name!r}, ' \
               f'{self._pos}/{self.size})'

    #--I/O Stream -----------------------------------------
    def seek(self, offset, whence=os.SEEK_SET, *debug_strs):
        """Buffer seek."""
        if whence == os.SEEK_CUR:
            new_pos = self._pos + offset
        elif whence == os.SEEK_END:
            new_pos = self.size + offset
        else:
            new_pos = offset
        if new_pos < 0 or new_pos > self.size:
            raise SaveReadError(self.in_name, debug_strs, new_pos, self.size)
        self._pos = new_pos

    def tell(self):
        """Buffer tell."""
        return self._pos

    def remaining(self):
        """Return the number of bytes left to read."""
        return self.size - self._pos

    def at_end(self):
        """Return True if current read position is at the end."""
        return self._pos == self.size

    #--Read/Unpack ----------------------------------------
    def read(self, size, *debug_strs):
        """Read size bytes from the buffer."""
        end_pos = self._pos + size
        if size < 0 or end_pos > self.size:
            raise SaveReadError(self.in_name, debug_strs, end_pos, self.size)
        chunk = self._data[self._pos:end_pos]
        self._pos = end_pos
        return chunk

    def unpack(self, struct_unpacker, size, *debug_strs):
        """Read size bytes and unpack them with struct_unpacker."""
        return struct_unpacker(self.read(size, *debug_strs))

    def read_int32(self, *debug_strs, __unpacker=_int32.unpack):
        return self.unpack(__unpacker, 4, *debug_strs)[0]

    def read_uint32(self, *debug_strs, __unpacker=_uint32.unpack):
        return self.unpack(__unpacker, 4, *debug_strs)[0]

    def read_uint8(self, *debug_strs, __unpacker=_uint8.unpack):
        return self.unpack(__unpacker, 1, *debug_strs)[0]

    def read_float(self, *debug_strs, __unpacker=_float.unpack):
        return self.unpack(__unpacker, 4, *debug_strs)[0]

    def read_bool32(self, *debug_strs):
        """Read a boolean stored as a 32-bit integer."""
        return self._to_bool(self.read_uint32(*debug_strs), debug_strs)

    def read_bool8(self, *debug_strs):
        """Read a boolean stored as a single byte."""
        return self._to_bool(self.read_uint8(*debug_strs), debug_strs)

    def _to_bool(self, raw_val, debug_strs):
        if raw_val > 1:
            raise SaveSizeError(self.in_name, debug_strs, raw_val, (0, 1))
        return bool(raw_val)

    def read_string(self, *debug_strs):
        """Read a length prefixed string. A negative length means UTF-16LE
        with -length characters, a positive one a single byte encoding. The
        stored length includes the terminator, which is stripped."""
        str_len = self.read_int32(*debug_strs)
        if str_len == 0:
            return ''
        if str_len < 0:
            raw_str = self.read(-str_len * 2, *debug_strs)
            str_val = raw_str.decode('utf-16-le', errors='surrogatepass')
        else:
            raw_str = self.read(str_len, *debug_strs)
            str_val = decoder(raw_str, bolt.saveEncoding)
        return str_val[:-1] if str_val.endswith('\x00') else str_val

#------------------------------------------------------------------------------
class SaveWriter(object):
    """Growable output buffer, the counterpart of SaveReader."""
    __slots__ = ('out',)

    def __init__(self):
        self.out = io.BytesIO()

    def __repr__(self):
        return f'{type(self).__name__}({self.tell()})'

    def tell(self):
        return self.out.tell()

    def getvalue(self) -> bytes:
        return self.out.getvalue()

    def write(self, data: bytes):
        self.out.write(data)

    def pack(self, struct_packer, *values):
        self.out.write(struct_packer(*values))

    def write_int32(self, value: int, __packer=_int32.pack):
        self.out.write(__packer(value))

    def write_uint32(self, value: int, __packer=_uint32.pack):
        self.out.write(__packer(value))

    def write_uint8(self, value: int, __packer=_uint8.pack):
        self.out.write(__packer(value))

    def write_float(self, value: float, __packer=_float.pack):
        self.out.write(__packer(value))

    def write_bool32(self, value: bool):
        self.write_uint32(1 if value else 0)

    def write_bool8(self, value: bool):
        self.write_uint8(1 if value else 0)

    def write_string(self, value: str):
        """Write a length prefixed, NUL terminated string. ASCII strings are
        stored one byte per character, anything else as UTF-16LE with a
        negative length."""
        value += '\x00'
        if value.isascii():
            encoded = value.encode('ascii')
            self.write_int32(len(encoded))
        else:
            encoded = value.encode('utf-16-le', errors='surrogatepass')
            self.write_int32(-(len(encoded) // 2))
        self.out.write(encoded)
