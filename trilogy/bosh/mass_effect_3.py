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
"""Mass Effect 3 saves (.pcsav), both editions write version 59."""
from __future__ import annotations

from .plot import Me1PlotTable, Me3PlotTable
from .shared import AutoReplyMode, DependentDlc, EndGameState, \
    Me3Difficulty, Placeable, Planet, Power, Rotator, SaveTimeStamp, Vector, \
    Weapon, WeaponLoadout, WeaponMod, decode_checksummed, \
    encode_checksummed, player_elements, world_elements
from ..brec import SavBool, SavDict, SavEnum, SavFloat, SavGuid, SavInt32, \
    SavList, SaveRecord, SavSet, SavString, SavStruct, SavVersion

ME3_VERSION = 59

class Me3Player(SaveRecord):
    save_set = SavSet(
        *player_elements((
            SavBool('is_combat_pawn'),
            SavBool('is_injured_pawn'),
            SavBool('use_casual_appearance'),
        )),
        SavInt32('credits'),
        SavInt32('medigel'),
        SavInt32('grenades'),
        SavFloat('current_fuel'),
        SavString('face_code'),
    )

class Me3Henchman(SaveRecord):
    save_set = SavSet(
        SavString('tag'),
        SavList('powers', SavStruct('_unused', Power)),
        SavInt32('character_level'),
        SavInt32('talent_points'),
        SavStruct('weapon_loadout', WeaponLoadout),
        SavString('mapped_power'),
        SavList('weapon_mods', SavStruct('_unused', WeaponMod)),
        SavInt32('grenades'),
        SavList('weapons', SavStruct('_unused', Weapon)),
    )

class System(SaveRecord):
    save_set = SavSet(
        SavInt32('id'),
        SavFloat('reaper_alert_level'),
        SavBool('reapers_detected'),
    )

class Me3GalaxyMap(SaveRecord):
    save_set = SavSet(
        SavList('planets', SavStruct('_unused', Planet)),
        SavList('systems', SavStruct('_unused', System)),
    )

class LevelTreasure(SaveRecord):
    save_set = SavSet(
        SavString('level_name'),
        SavInt32('credits'),
        SavInt32('xp'),
        SavList('items', SavString()),
    )

class Me3SaveGame(SaveRecord):
    """Root of an ME3 save."""
    save_set = SavSet(
        SavVersion('version', ME3_VERSION),
        SavString('debug_name'),
        SavFloat('seconds_played'),
        SavInt32('disc'),
        SavString('base_level_name'),
        SavString('base_level_name_display_override_as_read'),
        SavEnum('difficulty', Me3Difficulty, fallback=Me3Difficulty.Normal),
        SavEnum('end_game_state', EndGameState, SavInt32()),
        SavStruct('timestamp', SaveTimeStamp),
        SavStruct('location', Vector),
        SavStruct('rotation', Rotator),
        *world_elements(),
        SavList('placeables', SavStruct('_unused', Placeable)),
        SavList('pawns', SavGuid()),
        SavStruct('player', Me3Player),
        SavList('squad', SavStruct('_unused', Me3Henchman)),
        SavStruct('plot', Me3PlotTable),
        SavStruct('me1_plot', Me1PlotTable),
        SavDict('player_variables', SavString(), SavInt32()),
        SavStruct('galaxy_map', Me3GalaxyMap),
        SavList('dependent_dlcs', SavStruct('_unused', DependentDlc)),
        SavList('treasures', SavStruct('_unused', LevelTreasure)),
        SavEnum('auto_reply_mode', AutoReplyMode),
    )

    @property
    def plot_table(self):
        return self.plot

    @classmethod
    def decode_save(cls, in_name, data: bytes, *, strict=False):
        return decode_checksummed(cls, in_name, data, strict=strict)

    def encode_save(self) -> bytes:
        return encode_checksummed(self)
