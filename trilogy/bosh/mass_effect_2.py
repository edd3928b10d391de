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
"""Mass Effect 2 saves (.pcsav). The original release writes version 29, the
Legendary Edition version 30, which adds a display name for the current
level right after the level name."""
from __future__ import annotations

from .plot import Me1PlotTable, Me2PlotTable
from .shared import DependentDlc, EndGameState, Me2Difficulty, Planet, \
    Power, Rotator, SaveTimeStamp, Vector, WeaponLoadout, \
    decode_checksummed, encode_checksummed, player_elements, world_elements
from ..brec import SavEnum, SavFloat, SavGuid, SavInt32, SavList, SavNull, \
    SaveRecord, SavSet, SavString, SavStruct, SavUnion, SavVersion, \
    SinceVersionDecider

ME2_VERSION = 29
ME2_LE_VERSION = 30

class Me2Player(SaveRecord):
    save_set = SavSet(
        *player_elements(),
        SavInt32('credits'),
        SavInt32('medigel'),
        SavInt32('eezo'),
        SavInt32('iridium'),
        SavInt32('palladium'),
        SavInt32('platinum'),
        SavInt32('probes'),
        SavFloat('current_fuel'),
        SavString('face_code'),
    )

class Me2Henchman(SaveRecord):
    save_set = SavSet(
        SavString('tag'),
        SavList('powers', SavStruct('_unused', Power)),
        SavInt32('character_level'),
        SavInt32('talent_points'),
        SavStruct('weapon_loadout', WeaponLoadout),
        SavString('mapped_power'),
    )

class Me2GalaxyMap(SaveRecord):
    save_set = SavSet(
        SavList('planets', SavStruct('_unused', Planet)),
    )

class Me2SaveGame(SaveRecord):
    """Root of an ME2 save, both editions."""
    save_set = SavSet(
        SavVersion('version', ME2_VERSION, ME2_LE_VERSION),
        SavString('debug_name'),
        SavFloat('seconds_played'),
        SavInt32('disc'),
        SavString('base_level_name'),
        SavUnion({
            True: SavString('base_level_name_display_override_as_read'),
            False: SavNull('base_level_name_display_override_as_read'),
        }, SinceVersionDecider(ME2_LE_VERSION)),
        SavEnum('difficulty', Me2Difficulty, fallback=Me2Difficulty.Normal),
        SavEnum('end_game_state', EndGameState, SavInt32()),
        SavStruct('timestamp', SaveTimeStamp),
        SavStruct('location', Vector),
        SavStruct('rotation', Rotator),
        *world_elements(),
        SavList('pawns', SavGuid()),
        SavStruct('player', Me2Player),
        SavList('squad', SavStruct('_unused', Me2Henchman)),
        SavStruct('plot', Me2PlotTable),
        SavStruct('me1_plot', Me1PlotTable),
        SavStruct('galaxy_map', Me2GalaxyMap),
        SavList('dependent_dlcs', SavStruct('_unused', DependentDlc)),
    )

    @property
    def plot_table(self):
        return self.plot

    @property
    def is_legendary(self):
        return self.version >= ME2_LE_VERSION

    @classmethod
    def decode_save(cls, in_name, data: bytes, *, strict=False):
        return decode_checksummed(cls, in_name, data, strict=strict)

    def encode_save(self) -> bytes:
        return encode_checksummed(self)
