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
"""Records and enums used by more than one title."""
from __future__ import annotations

import os
import zlib
from enum import IntEnum

from ..bolt import deprint
from ..brec import SavBool, SavBool8, SavEnum, SavFloat, SavGuid, SavInt32, \
    SavList, SavOptional, SaveReader, SaveRecord, SaveWriter, SavSet, \
    SavString, SavStruct, SavUInt8
from ..exception import SaveChecksumError, SaveFileError

# Enums -----------------------------------------------------------------------
class Origin(IntEnum):
    None_ = 0
    Spacer = 1
    Colonist = 2
    Earthborn = 3

class Notoriety(IntEnum):
    None_ = 0
    Survivor = 1
    Warhero = 2
    Ruthless = 3

class EndGameState(IntEnum):
    NotFinished = 0
    OutInTheBlaze = 1
    LivedToFightAgain = 2

class Me2Difficulty(IntEnum):
    Casual = 0
    Normal = 1
    Veteran = 2
    Hardcore = 3
    Insanity = 4

class Me3Difficulty(IntEnum):
    Narrative = 0
    Casual = 1
    Normal = 2
    Hardcore = 3
    Insanity = 4
    WhatIsBeyondInsanity = 5

class AutoReplyMode(IntEnum):
    AllDecisions = 0
    MajorDecisions = 1
    NoDecisions = 2

# Geometry --------------------------------------------------------------------
class Vector(SaveRecord):
    save_set = SavSet(
        SavFloat('x'),
        SavFloat('y'),
        SavFloat('z'),
    )

class Vector2d(SaveRecord):
    save_set = SavSet(
        SavFloat('x'),
        SavFloat('y'),
    )

class Rotator(SaveRecord):
    save_set = SavSet(
        SavInt32('pitch'),
        SavInt32('yaw'),
        SavInt32('roll'),
    )

class SaveTimeStamp(SaveRecord):
    save_set = SavSet(
        SavInt32('seconds_since_midnight'),
        SavInt32('day'),
        SavInt32('month'),
        SavInt32('year'),
    )

# World state -----------------------------------------------------------------
class Level(SaveRecord):
    save_set = SavSet(
        SavString('name'),
        SavBool('should_be_loaded'),
        SavBool('should_be_visible'),
    )

class StreamingState(SaveRecord):
    save_set = SavSet(
        SavString('name'),
        SavBool('is_active'),
    )

class KismetRecord(SaveRecord):
    save_set = SavSet(
        SavGuid('guid'),
        SavBool('value'),
    )

class Door(SaveRecord):
    save_set = SavSet(
        SavGuid('guid'),
        SavUInt8('current_state'),
        SavUInt8('old_state'),
    )

class Placeable(SaveRecord):
    save_set = SavSet(
        SavGuid('guid'),
        SavBool8('is_destroyed'),
        SavBool8('is_deactivated'),
    )

class Planet(SaveRecord):
    save_set = SavSet(
        SavInt32('id'),
        SavBool('visited'),
        SavList('probes', SavStruct('_unused', Vector2d)),
    )

class DependentDlc(SaveRecord):
    save_set = SavSet(
        SavInt32('id'),
        SavString('name'),
        SavString('canonical_name'),
    )

def world_elements():
    """The world state lists every ME2 and ME3 save carries right after its
    header."""
    return (
        SavInt32('current_loading_tip'),
        SavList('levels', SavStruct('_unused', Level)),
        SavList('streaming_records', SavStruct('_unused', StreamingState)),
        SavList('kismet_records', SavStruct('_unused', KismetRecord)),
        SavList('doors', SavStruct('_unused', Door)),
    )

# Characters ------------------------------------------------------------------
class Power(SaveRecord):
    save_set = SavSet(
        SavString('name'),
        SavFloat('current_rank'),
        SavString('power_class_name'),
        SavInt32('wheel_display_index'),
    )

class Weapon(SaveRecord):
    save_set = SavSet(
        SavString('class_name'),
        SavInt32('ammo_used_count'),
        SavInt32('ammo_total'),
        SavBool('current_weapon'),
        SavBool('was_last_weapon'),
        SavString('ammo_power_name'),
    )

class WeaponMod(SaveRecord):
    save_set = SavSet(
        SavString('weapon_class_name'),
        SavList('weapon_mod_class_names', SavString()),
    )

class WeaponLoadout(SaveRecord):
    save_set = SavSet(
        SavString('assault_rifle'),
        SavString('shotgun'),
        SavString('sniper_rifle'),
        SavString('submachine_gun'),
        SavString('pistol'),
        SavString('heavy_weapon'),
    )

class MorphFeature(SaveRecord):
    save_set = SavSet(
        SavString('feature'),
        SavFloat('offset'),
    )

class HeadMorph(SaveRecord):
    save_set = SavSet(
        SavString('hair_mesh'),
        SavList('accessory_mesh', SavString()),
        SavList('morph_features', SavStruct('_unused', MorphFeature)),
        SavList('lod0_vertices', SavStruct('_unused', Vector)),
    )

def player_elements(first_elements=()):
    """The player fields ME2 and ME3 share, in file order. first_elements are
    title specific fields that come right after the class name."""
    return (
        SavBool('is_female'),
        SavString('class_name'),
        *first_elements,
        SavInt32('level'),
        SavFloat('current_xp'),
        SavString('first_name'),
        SavInt32('last_name'),
        SavEnum('origin', Origin),
        SavEnum('notoriety', Notoriety),
        SavInt32('talent_points'),
        SavString('mapped_power_1'),
        SavString('mapped_power_2'),
        SavString('mapped_power_3'),
        SavOptional('head_morph', SavStruct('_unused', HeadMorph)),
        SavList('powers', SavStruct('_unused', Power)),
        SavList('weapons', SavStruct('_unused', Weapon)),
        SavList('weapon_mods', SavStruct('_unused', WeaponMod)),
        SavStruct('loadout', WeaponLoadout),
        SavString('primary_weapon'),
        SavString('secondary_weapon'),
    )

# Checksums -------------------------------------------------------------------
def decode_checksummed(record_type, in_name, data: bytes, *,
                       strict=False):
    """Decodes record_type from data, which ends with the CRC32 of everything
    before it. A mismatch is only a warning unless strict is set. The record
    has to take up everything before the checksum."""
    ins = SaveReader(in_name, data)
    ins.seek(-4, os.SEEK_END, 'checksum')
    stored = ins.read_uint32('checksum')
    payload = data[:-4]
    if stored != (computed := zlib.crc32(payload)):
        if strict:
            raise SaveChecksumError(in_name, stored, computed)
        deprint(f'{in_name}: stored checksum {stored:08X} does not match '
                f'computed {computed:08X}, the save may be corrupted')
    ins = SaveReader(in_name, payload)
    record = record_type.decode(ins)
    if not ins.at_end():
        raise SaveFileError(in_name, f'{ins.remaining()} unexpected bytes '
                                     f'before the checksum')
    return record

def encode_checksummed(record) -> bytes:
    """Encodes record and appends the CRC32 of the encoded bytes."""
    out = SaveWriter()
    record.encode(out)
    out.write_uint32(zlib.crc32(out.getvalue()))
    return out.getvalue()
