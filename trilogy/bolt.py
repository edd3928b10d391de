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
"""Low level helpers shared by every other module: string decoding, struct
caching, case insensitive strings and debug printing."""
from __future__ import annotations

import os
import struct
import sys
import traceback as _traceback

import chardet

# structure aliases
struct_error = struct.error

# Unicode ---------------------------------------------------------------------
# Single byte save strings carry no encoding marker: it is whatever code page
# the localized game ran with. UTF-16 strings never go through here.
encodingOrder = (
    'ascii',
    'cp1252',   # English, German, French, Italian, Spanish
    'cp1251',   # Russian
    'cp1250',   # Polish
    'utf8',
    'latin-1',  # decodes anything, must stay last
)

# chardet names -> the codec names used above
_detected_aliases = {
    'windows-1252': 'cp1252',
    'windows-1251': 'cp1251',
    'windows-1250': 'cp1250',
    'utf-8': 'utf8',
}

# Code page tried before any detection, set from General.save_encoding.
# None skips straight to detection
saveEncoding = 'cp1252'

# Detected encodings Python has no codec for
_unsupported = {'EUC-TW'}

# Below this, a chardet guess is no better than trial and error
_MIN_CONFIDENCE = 0.55

def getbestencoding(bitstream):
    """Guesses the encoding of bitstream with chardet and returns it along
    with the confidence of the guess. Empty input is reported as UTF-8."""
    if not bitstream:
        return 'utf8', 1.0
    guess = chardet.detect(bitstream)
    detected = guess['encoding']
    return _detected_aliases.get(detected, detected), guess['confidence']

def _try_decode(byte_str, encoding):
    try:
        return str(byte_str, encoding)
    except (UnicodeDecodeError, LookupError):
        return None

def decoder(byte_str, encoding=None, avoidEncodings=()) -> str:
    """Turns the raw bytes of a save string into text. Tries encoding
    first, then whatever chardet is confident about, then every entry of
    encodingOrder in turn. Text and None are passed through."""
    if byte_str is None or isinstance(byte_str, str):
        return byte_str
    if encoding and (text := _try_decode(byte_str, encoding)) is not None:
        return text
    detected, confidence = getbestencoding(byte_str)
    usable = detected and detected not in _unsupported and (
        confidence == 1.0 or (confidence >= _MIN_CONFIDENCE
                              and detected not in avoidEncodings))
    if usable and (text := _try_decode(byte_str, detected)) is not None:
        return text
    for fallback in encodingOrder:
        if (text := _try_decode(byte_str, fallback)) is not None:
            return text
    raise UnicodeError(f'Could not decode {byte_str!r} with any encoding')

class CIstr(str):
    """Case insensitive string, used for the class names the games store
    with inconsistent casing."""
    __slots__ = ()

    def __hash__(self):
        return hash(self.lower())

    def __eq__(self, other):
        if not isinstance(other, str):
            return NotImplemented
        return self.lower() == other.lower()

    def __ne__(self, other):
        if not isinstance(other, str):
            return NotImplemented
        return self.lower() != other.lower()

    def __lt__(self, other):
        if not isinstance(other, CIstr):
            return NotImplemented
        return self.lower() < other.lower()

    def __repr__(self):
        return f'{type(self).__name__}({str.__repr__(self)})'

# Structure wrappers ----------------------------------------------------------
class _StructsCache(dict):
    """Format string -> compiled struct.Struct, built on first use."""
    __slots__ = ()

    def __missing__(self, struct_format):
        compiled = self[struct_format] = struct.Struct(struct_format)
        return compiled

structs_cache = _StructsCache()

def get_structs(struct_format):
    """Returns the unpack and pack methods and the size of the (cached)
    struct for struct_format."""
    compiled = structs_cache[struct_format]
    return compiled.unpack, compiled.pack, compiled.size

# Log/Progress ----------------------------------------------------------------
# Save folders sit below the user's home, which has no place in a log
_HOME = os.path.expanduser('~')
_HOME_MASK = os.path.join(os.path.dirname(_HOME), '*****')

def _caller_location(frame):
    caller = sys._getframe(frame + 1)
    code = caller.f_code
    return (f'{os.path.basename(code.co_filename)} {caller.f_lineno:4d} '
            f'{code.co_name}: ')

def deprint(*args, traceback=False, trace=True, frame=1):
    """Debug print. Joins args with spaces and prints them to stdout.

    trace: prefix the file, line and function of the caller. frame picks
        which caller, 1 being the function that called deprint.
    traceback: append the exception currently being handled and print to
        stderr instead."""
    parts = [_caller_location(frame)] if trace else []
    parts.append(' '.join(f'{a}' for a in args))
    out_stream = sys.stdout
    if traceback:
        parts.append('\n' + _traceback.format_exc())
        out_stream = sys.stderr
    print(''.join(parts).replace(_HOME, _HOME_MASK), file=out_stream,
          flush=True)
