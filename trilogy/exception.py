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
"""This module contains all custom exceptions for Trilogy Save Editor."""

# NO LOCAL IMPORTS! This has to be importable from any module/package.

class BoltError(Exception):
    """Base class of every error the editor raises on purpose. Carries a
    human readable message."""
    def __init__(self, message):
        self.message = message
    def __str__(self):
        return self.message

# Code errors -----------------------------------------------------------------
class ArgumentError(BoltError):
    """A caller passed a value the operation cannot accept: a malformed field
    path, a value that does not fit the field, an unknown game..."""
    def __init__(self, message='Invalid argument.'):
        super(ArgumentError, self).__init__(message)

# File exceptions -------------------------------------------------------------
class FileError(BoltError):
    """Reading or writing a file failed. The file name prefixes the
    message."""
    def __init__(self, in_name, message):
        super(FileError, self).__init__(message)
        self._in_name = f'{in_name}' if in_name else '<memory>'

    def __str__(self):
        return f'{self._in_name}: {self.message}'

class SaveFileError(FileError):
    """A save could not be decoded or written."""

# Save I/O Errors -------------------------------------------------------------
def _field_label(debug_str):
    """Renders the field trail a reader was given, e.g. ('player', 'name')
    becomes 'player.name'."""
    if isinstance(debug_str, (tuple, list)):
        return '.'.join(f'{d}' for d in debug_str)
    return debug_str

class SaveReadError(SaveFileError):
    """The save ended (or would start) before the bytes a field needs."""
    def __init__(self, in_name, debug_str, try_pos, max_pos):
        where = _field_label(debug_str)
        if try_pos < 0:
            message = f'{where}: offset {try_pos} is before the start of ' \
                      f'the save'
        else:
            message = f'{where}: needs data up to offset {try_pos}, but the ' \
                      f'save ends at {max_pos}'
        super(SaveReadError, self).__init__(in_name, message)
        self.try_pos = try_pos
        self.max_pos = max_pos

class SaveSizeError(SaveFileError):
    """A count, flag or length read from (or written to) a save is outside
    the range its field allows."""
    def __init__(self, in_name, debug_str, bad_value, allowed_range):
        message = f'{_field_label(debug_str)}: {bad_value} is not within ' \
                  f'{allowed_range}'
        super(SaveSizeError, self).__init__(in_name, message)

class SaveHeaderError(SaveFileError):
    """The save belongs to another game or to a version we cannot read."""

class SaveChecksumError(SaveFileError):
    """The CRC32 stored at the end of the save does not match its data."""
    def __init__(self, in_name, stored, computed):
        super(SaveChecksumError, self).__init__(in_name,
            f'Checksum mismatch: stored {stored:08X}, computed '
            f'{computed:08X}')

# Compare exceptions ----------------------------------------------------------
class CompareError(BoltError):
    """A comparison of two saves could not be carried out. side is the
    failing side ('source' or 'target'), or None if both are affected."""
    def __init__(self, side, message):
        super(CompareError, self).__init__(message)
        self.side = side

    def __str__(self):
        if self.side is None:
            return self.message
        return f'{self.side} save: {self.message}'
