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
import os

import pytest

from .. import bolt
from ..brec import SaveReader, SaveWriter
from ..exception import SaveReadError, SaveSizeError

def _written(write_func, *values):
    out = SaveWriter()
    write_func(out, *values)
    return out.getvalue()

class TestSaveReader(object):
    def test_read_numbers(self):
        """Numbers are little endian."""
        ins = SaveReader('test', b'\x01\x00\x00\x00\xff\xff\xff\xff\x07'
                                 b'\x00\x00\xc0\x3f')
        assert ins.read_int32() == 1
        assert ins.read_uint32() == 0xFFFFFFFF
        assert ins.read_uint8() == 7
        assert ins.read_float() == 1.5
        assert ins.at_end()

    def test_read_past_end(self):
        """Reading past the end fails and leaves the position alone."""
        ins = SaveReader('test', b'\x01\x02\x03')
        with pytest.raises(SaveReadError) as exc_info:
            ins.read_int32('level')
        assert 'level' in str(exc_info.value)
        assert exc_info.value.try_pos == 4
        assert exc_info.value.max_pos == 3
        assert ins.tell() == 0
        assert ins.read(3) == b'\x01\x02\x03'

    def test_negative_read(self):
        with pytest.raises(SaveReadError):
            SaveReader('test', b'\x00' * 8).read(-1)

    def test_seek(self):
        ins = SaveReader('test', b'\x00' * 8)
        ins.seek(-4, os.SEEK_END)
        assert ins.tell() == 4
        ins.seek(2, os.SEEK_CUR)
        assert ins.remaining() == 2
        ins.seek(8)
        assert ins.at_end()
        with pytest.raises(SaveReadError):
            ins.seek(9)
        with pytest.raises(SaveReadError):
            ins.seek(-1)

    def test_bools(self):
        ins = SaveReader('test', b'\x01\x00\x00\x00\x00\x02')
        assert ins.read_bool32() is True
        assert ins.read_bool8() is False
        # Only 0 and 1 are valid booleans
        with pytest.raises(SaveSizeError):
            ins.read_bool8('is_female')

    def test_empty_string(self):
        """A zero length means an empty string with no terminator."""
        ins = SaveReader('test', b'\x00\x00\x00\x00')
        assert ins.read_string() == ''
        assert ins.at_end()

    def test_single_byte_string(self):
        ins = SaveReader('test', b'\x05\x00\x00\x00Jack\x00')
        assert ins.read_string() == 'Jack'
        assert ins.at_end()

    def test_single_byte_string_encoding(self):
        """Single byte strings use the configured save encoding."""
        ins = SaveReader('test', b'\x06\x00\x00\x00\xc4pfel\x00')
        assert ins.read_string() == '\xc4pfel'
        try:
            bolt.saveEncoding = 'cp1251'
            ins = SaveReader('test', b'\x03\x00\x00\x00\xc4\xe0\x00')
            assert ins.read_string() == 'Да'
        finally:
            bolt.saveEncoding = 'cp1252'

    def test_utf16_string(self):
        """A negative length counts UTF-16 code units."""
        ins = SaveReader('test', b'\xfd\xff\xff\xff\x1f\x04\x40\x04\x00\x00')
        assert ins.read_string() == 'Пр'
        assert ins.at_end()

    def test_truncated_string(self):
        with pytest.raises(SaveReadError):
            SaveReader('test', b'\x10\x00\x00\x00Jack').read_string()

class TestSaveWriter(object):
    def test_write_numbers(self):
        out = SaveWriter()
        out.write_int32(-2)
        out.write_uint32(3)
        out.write_uint8(255)
        out.write_float(-0.5)
        out.write_bool32(True)
        out.write_bool8(False)
        assert out.getvalue() == (b'\xfe\xff\xff\xff\x03\x00\x00\x00\xff'
                                  b'\x00\x00\x00\xbf\x01\x00\x00\x00\x00')
        assert out.tell() == 18

    def test_write_strings(self):
        assert _written(SaveWriter.write_string, 'Jack') == \
               b'\x05\x00\x00\x00Jack\x00'
        # Empty strings still get a terminator
        assert _written(SaveWriter.write_string, '') == \
               b'\x01\x00\x00\x00\x00'
        # Anything that is not ASCII is written as UTF-16
        assert _written(SaveWriter.write_string, 'Пр') == \
               b'\xfd\xff\xff\xff\x1f\x04\x40\x04\x00\x00'

    @pytest.mark.parametrize('str_val', ['', 'Normandy SR-2', 'Ш\xe9pard',
                                         'Garrus Vakarian\u2122'])
    def test_string_round_trip(self, str_val):
        data = _written(SaveWriter.write_string, str_val)
        ins = SaveReader('test', data)
        assert ins.read_string() == str_val
        assert ins.at_end()
