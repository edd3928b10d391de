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
"""Houses basic building blocks for creating save record definitions.
Somewhat higher-level building blocks can be found in advanced_elements.py."""
from __future__ import annotations

import uuid

from .save_io import SaveReader, SaveWriter
from ..bolt import deprint, get_structs, structs_cache
from ..exception import SaveHeaderError, SaveReadError, SaveSizeError

_INT32_MAX = 2 ** 31 - 1

#------------------------------------------------------------------------------
class BoolVec(list):
    """The in-memory form of a bitfield of booleans. The length is always a
    whole number of 32-bit words, so that it survives a round trip through the
    file unchanged."""
    __slots__ = ()

    def grow_to(self, bit_count):
        """Append False until at least bit_count bits are held, rounding up to
        the next word. Never shrinks."""
        target = -(-bit_count // 32) * 32
        if target > len(self):
            self.extend([False] * (target - len(self)))

    @classmethod
    def from_words(cls, words):
        return cls(bool((w >> b) & 1) for w in words for b in range(32))

    def to_words(self):
        words = []
        for w_dex in range(0, len(self), 32):
            word = 0
            for b, bit in enumerate(self[w_dex:w_dex + 32]):
                if bit: word |= 1 << b
            words.append(word)
        return words

#------------------------------------------------------------------------------
class SaveElement(object):
    """Represents a save entity. Like the records they make up, instances of
    this class are parasitic: they hold no data themselves, but use the
    load_sav API to set host record attributes (from a SaveReader) and
    dump_sav to write those attributes out (to a SaveWriter). decode and
    encode do the same for a bare value, which is what sequences, maps and
    optionals use for their items. Note attr defaults to '_unused' for that
    usage, where the attribute name does not matter."""
    __slots__ = ('attr',)
    # The least number of bytes an encoded value takes, used to reject counts
    # that cannot possibly fit in the rest of the file
    min_size = 0

    def __init__(self, attr='_unused'):
        self.attr = attr

    def getSlotsUsed(self):
        return self.attr,

    def getDefault(self):
        """Returns a fresh default value."""
        raise NotImplementedError

    def setDefault(self, record):
        """Sets default value for record instance."""
        setattr(record, self.attr, self.getDefault())

    def load_sav(self, record, ins: SaveReader, *debug_strs):
        """Read the value of this element from ins into record attribute."""
        setattr(record, self.attr, self.decode(ins, *debug_strs, self.attr))

    def dump_sav(self, record, out: SaveWriter):
        """Write the record attribute of this element to out."""
        self.encode(out, getattr(record, self.attr))

    def decode(self, ins: SaveReader, *debug_strs):
        raise NotImplementedError

    def encode(self, out: SaveWriter, value):
        raise NotImplementedError

    def __repr__(self):
        return f'{type(self).__name__}({self.attr!r})'

# Simple static Fields --------------------------------------------------------
class SavNum(SaveElement):
    """A little endian number of fixed width."""
    _unpacker, _packer, static_size = get_structs('<i')
    __slots__ = ()

    @property
    def min_size(self):
        return self.static_size

    def getDefault(self):
        return 0

    def decode(self, ins, *debug_strs):
        return ins.unpack(self._unpacker, self.static_size, *debug_strs)[0]

    def encode(self, out, value):
        out.pack(self._packer, value)

class SavInt32(SavNum):
    __slots__ = ()

class SavUInt32(SavNum):
    _unpacker, _packer, static_size = get_structs('<I')
    __slots__ = ()

class SavUInt8(SavNum):
    _unpacker, _packer, static_size = get_structs('<B')
    __slots__ = ()

class SavFloat(SavNum):
    _unpacker, _packer, static_size = get_structs('<f')
    __slots__ = ()

    def getDefault(self):
        return 0.0

class SavBool(SaveElement):
    """A boolean stored as a 32-bit integer, the usual form in save files."""
    __slots__ = ()
    min_size = 4

    def getDefault(self):
        return False

    def decode(self, ins, *debug_strs):
        return ins.read_bool32(*debug_strs)

    def encode(self, out, value):
        out.write_bool32(value)

class SavBool8(SavBool):
    """A boolean stored as a single byte."""
    __slots__ = ()
    min_size = 1

    def decode(self, ins, *debug_strs):
        return ins.read_bool8(*debug_strs)

    def encode(self, out, value):
        out.write_bool8(value)

class SavString(SaveElement):
    """A length prefixed string, see SaveReader.read_string."""
    __slots__ = ()
    min_size = 4

    def getDefault(self):
        return ''

    def decode(self, ins, *debug_strs):
        return ins.read_string(*debug_strs)

    def encode(self, out, value):
        out.write_string(value)

class SavGuid(SaveElement):
    """A 16 byte GUID in the Windows (mixed endian) layout."""
    __slots__ = ()
    min_size = 16

    def getDefault(self):
        return uuid.UUID(int=0)

    def decode(self, ins, *debug_strs):
        return uuid.UUID(bytes_le=ins.read(16, *debug_strs))

    def encode(self, out, value):
        out.write(value.bytes_le)

class SavVersion(SavInt32):
    """The format version of a save. Raises a SaveHeaderError for versions
    this element was not told about. The default is the newest version."""
    __slots__ = ('valid_versions',)

    def __init__(self, attr, *valid_versions):
        super().__init__(attr)
        self.valid_versions = valid_versions

    def getDefault(self):
        return self.valid_versions[-1]

    def decode(self, ins, *debug_strs):
        ver = super().decode(ins, *debug_strs)
        if ver not in self.valid_versions:
            raise SaveHeaderError(ins.in_name,
                f'Unsupported save version {ver}, expected one of '
                f'{self.valid_versions}')
        return ver

class SavBytes(SaveElement):
    """Fixed size chunk of bytes kept as is."""
    __slots__ = ('_size',)

    def __init__(self, attr, size_):
        super().__init__(attr)
        self._size = size_

    @property
    def min_size(self):
        return self._size

    def getDefault(self):
        return b'\x00' * self._size

    def decode(self, ins, *debug_strs):
        return ins.read(self._size, *debug_strs)

    def encode(self, out, value):
        if len(value) != self._size:
            raise SaveSizeError(None, self.attr, len(value),
                                (self._size, self._size))
        out.write(value)

class SavTail(SaveElement):
    """Everything left in the buffer, kept as an undecoded blob so that the
    parts of a format we don't understand survive a round trip."""
    __slots__ = ()

    def getDefault(self):
        return b''

    def decode(self, ins, *debug_strs):
        return ins.read(ins.remaining(), *debug_strs)

    def encode(self, out, value):
        out.write(value)

class SavNull(SaveElement):
    """Reads and writes nothing, the value is always None. Used as the
    'absent' branch of unions."""
    __slots__ = ()

    def getDefault(self):
        return None

    def decode(self, ins, *debug_strs):
        return None

    def encode(self, out, value):
        pass

#------------------------------------------------------------------------------
class SavEnum(SaveElement):
    """A number that stands for a member of an IntEnum. Values the enum
    does not know decode to the fallback member (by default the first one)
    instead of failing, so that saves written by newer game versions can
    still be opened."""
    __slots__ = ('enum_type', 'fallback', '_num')

    def __init__(self, attr, enum_type, num_element=None, *, fallback=None):
        super().__init__(attr)
        self.enum_type = enum_type
        self.fallback = next(iter(enum_type)) if fallback is None else \
            fallback
        self._num = num_element or SavUInt8()

    @property
    def min_size(self):
        return self._num.min_size

    def getDefault(self):
        return self.fallback

    def decode(self, ins, *debug_strs):
        raw_val = self._num.decode(ins, *debug_strs)
        try:
            return self.enum_type(raw_val)
        except ValueError:
            deprint(f'{".".join(map(str, debug_strs))}: unknown '
                    f'{self.enum_type.__name__} value {raw_val}, using '
                    f'{self.fallback.name}')
            return self.fallback

    def encode(self, out, value):
        self._num.encode(out, int(value))

# Containers ------------------------------------------------------------------
class _SavCounted(SaveElement):
    """Base class for elements prefixed by a signed 32-bit item count."""
    __slots__ = ()
    min_size = 4

    def _item_size(self):
        raise NotImplementedError

    def _read_count(self, ins: SaveReader, debug_strs):
        count = ins.read_int32(*debug_strs)
        if count < 0:
            raise SaveSizeError(ins.in_name, debug_strs, count,
                                (0, _INT32_MAX))
        if (needed := count * self._item_size()) > ins.remaining():
            raise SaveReadError(ins.in_name, debug_strs, ins.tell() + needed,
                                ins.size)
        return count

class SavList(_SavCounted):
    """A homogeneous sequence: count, then that many items."""
    __slots__ = ('element',)

    def __init__(self, attr, element: SaveElement):
        super().__init__(attr)
        self.element = element

    def _item_size(self):
        return self.element.min_size

    def getDefault(self):
        return []

    def decode(self, ins, *debug_strs):
        count = self._read_count(ins, debug_strs)
        item_decode = self.element.decode
        return [item_decode(ins, *debug_strs, i) for i in range(count)]

    def encode(self, out, value):
        out.write_int32(len(value))
        item_encode = self.element.encode
        for item in value:
            item_encode(out, item)

class SavDict(_SavCounted):
    """An associative structure: count, then that many key/value pairs.
    Insertion order is kept. If a key occurs more than once the last value
    wins, as saves are not guaranteed to be clean."""
    __slots__ = ('key_element', 'value_element')

    def __init__(self, attr, key_element: SaveElement,
                 value_element: SaveElement):
        super().__init__(attr)
        self.key_element = key_element
        self.value_element = value_element

    def _item_size(self):
        return self.key_element.min_size + self.value_element.min_size

    def getDefault(self):
        return {}

    def decode(self, ins, *debug_strs):
        count = self._read_count(ins, debug_strs)
        key_decode = self.key_element.decode
        value_decode = self.value_element.decode
        result = {}
        for i in range(count):
            key = key_decode(ins, *debug_strs, i)
            if key in result:
                deprint(f'{".".join(map(str, debug_strs))}: duplicate key '
                        f'{key!r}, keeping the last value')
            result[key] = value_decode(ins, *debug_strs, key)
        return result

    def encode(self, out, value):
        out.write_int32(len(value))
        key_encode = self.key_element.encode
        value_encode = self.value_element.encode
        for k, v in value.items():
            key_encode(out, k)
            value_encode(out, v)

class SavOptional(SaveElement):
    """A one byte presence flag, followed by the payload if present. None
    stands for an absent value."""
    __slots__ = ('element',)
    min_size = 1

    def __init__(self, attr, element: SaveElement):
        super().__init__(attr)
        self.element = element

    def getDefault(self):
        return None

    def decode(self, ins, *debug_strs):
        if ins.read_bool8(*debug_strs):
            return self.element.decode(ins, *debug_strs)
        return None

    def encode(self, out, value):
        out.write_bool8(value is not None)
        if value is not None:
            self.element.encode(out, value)

# one bitfield word
_word = structs_cache['<I']

class SavBoolVec(_SavCounted):
    """A bitfield: count of 32-bit words, then the words. Bit i lives in
    word i // 32, least significant bit first."""
    __slots__ = ()

    def _item_size(self):
        return 4

    def getDefault(self):
        return BoolVec()

    def decode(self, ins, *debug_strs):
        count = self._read_count(ins, debug_strs)
        raw_words = ins.read(count * 4, *debug_strs)
        return BoolVec.from_words(w for (w,) in _word.iter_unpack(raw_words))

    def encode(self, out, value):
        if not isinstance(value, BoolVec):
            value = BoolVec(value)
        words = value.to_words()
        out.write_int32(len(words))
        for word in words:
            out.write_uint32(word)

class SavStruct(SaveElement):
    """A nested record, stored inline with no header."""
    __slots__ = ('record_type',)

    def __init__(self, attr, record_type):
        super().__init__(attr)
        self.record_type = record_type

    @property
    def min_size(self):
        return self.record_type.save_set.min_size

    def getDefault(self):
        return self.record_type()

    def decode(self, ins, *debug_strs):
        return self.record_type.decode(ins, *debug_strs)

    def encode(self, out, value):
        value.encode(out)

    def __repr__(self):
        return f'{type(self).__name__}({self.attr!r}, ' \
               f'{self.record_type.__name__})'
