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
"""Mass Effect 1 saves. The original release stores a zip archive
(.MassEffectSave) whose state.sav member holds the game state, the Legendary
Edition a single checksummed file (.pcsav). Only the parts leading up to the
plot table are decoded, the rest is carried over byte for byte."""
from __future__ import annotations

__author__ = 'Trilogy Save Editor Team'

import io
import zipfile

from .plot import Me1PlotTable
from .shared import SaveTimeStamp, decode_checksummed, encode_checksummed
from ..brec import SavFloat, SaveReader, SaveRecord, SaveWriter, SavSet, \
    SavString, SavStruct, SavTail, SavVersion
from ..exception import SaveFileError, SaveHeaderError

ME1_LE_VERSION = 50

class Me1State(SaveRecord):
    """The decoded part of state.sav."""
    save_set = SavSet(
        SavString('base_level_name'),
        SavStruct('timestamp', SaveTimeStamp),
        SavFloat('seconds_played'),
        SavStruct('plot', Me1PlotTable),
        SavTail('unparsed'),
    )

class Me1SaveGame(SaveRecord):
    """Root of an original ME1 save. The other members of the archive are
    kept in _members and written back unchanged, in their original order."""
    __slots__ = ('_members',)
    state_member = 'state.sav'
    save_set = SavSet(
        SavStruct('state', Me1State),
    )

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._members = {}

    @property
    def plot_table(self):
        return self.state.plot

    @classmethod
    def decode_save(cls, in_name, data: bytes, *, strict=False):
        try:
            with zipfile.ZipFile(io.BytesIO(data)) as zf:
                members = {i.filename: (i, zf.read(i)) for i in zf.infolist()}
        except (zipfile.BadZipFile, zipfile.LargeZipFile) as e:
            raise SaveFileError(in_name, f'Not a valid save archive: {e}') \
                from e
        if cls.state_member not in members:
            raise SaveHeaderError(in_name, f'Archive has no '
                                           f'{cls.state_member} member')
        state_name = f'{in_name}/{cls.state_member}'
        save = cls.__new__(cls)
        save.state = Me1State.decode(SaveReader(
            state_name, members[cls.state_member][1]))
        save._members = members
        return save

    def encode_save(self) -> bytes:
        out = SaveWriter()
        self.state.encode(out)
        state_data = out.getvalue()
        buff = io.BytesIO()
        with zipfile.ZipFile(buff, 'w', zipfile.ZIP_DEFLATED) as zf:
            if self.state_member not in self._members:
                zf.writestr(self.state_member, state_data)
            for member_name, (info, member_data) in self._members.items():
                if member_name == self.state_member:
                    member_data = state_data
                zf.writestr(info, member_data)
        return buff.getvalue()

#------------------------------------------------------------------------------
class Me1LeSaveData(SaveRecord):
    save_set = SavSet(
        SavString('base_level_name'),
        SavStruct('timestamp', SaveTimeStamp),
        SavFloat('seconds_played'),
        SavStruct('plot', Me1PlotTable),
        SavTail('unparsed'),
    )

class Me1LeSaveGame(SaveRecord):
    """Root of an ME1 Legendary Edition save."""
    save_set = SavSet(
        SavVersion('version', ME1_LE_VERSION),
        SavString('character_id'),
        SavStruct('created_date', SaveTimeStamp),
        SavStruct('save_data', Me1LeSaveData),
    )

    @property
    def plot_table(self):
        return self.save_data.plot

    @classmethod
    def decode_save(cls, in_name, data: bytes, *, strict=False):
        return decode_checksummed(cls, in_name, data, strict=strict)

    def encode_save(self) -> bytes:
        return encode_checksummed(self)
