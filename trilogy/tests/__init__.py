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
"""Helpers shared by the tests. Saves are built in memory from the record
types themselves, so no binary resources are needed."""
import io
import zipfile

from ..bosh import Game
from ..bosh.mass_effect_1 import Me1SaveGame, Me1State
from ..brec import BoolVec, SaveReader, SaveWriter

def encode_value(element, value) -> bytes:
    """Encodes a single value with the specified element."""
    out = SaveWriter()
    element.encode(out, value)
    return out.getvalue()

def decode_value(element, data: bytes):
    """Decodes a single value with the specified element, checking that all
    of data was used up."""
    ins = SaveReader('test', data)
    value = element.decode(ins)
    assert ins.at_end(), f'{ins.remaining()} bytes left over'
    return value

def encode_record(record) -> bytes:
    out = SaveWriter()
    record.encode(out)
    return out.getvalue()

def bools(*set_ids, size=64):
    """Returns a BoolVec of size bits with only the specified ids set."""
    vec = BoolVec([False] * size)
    for plot_id in set_ids:
        vec[plot_id] = True
    return vec

def make_save(game: Game, **plot_values):
    """Returns a default save tree of the specified game, with its plot
    table filled in from plot_values (booleans, integers, floats)."""
    save_tree = game.new_save()
    plot_table = save_tree.plot_table
    for space, values in plot_values.items():
        setattr(plot_table, space, values)
    return save_tree

def me1_archive(state: Me1State, extra_members=()) -> bytes:
    """Builds an ME1 save archive around state. extra_members is a sequence
    of (name, data) written before state.sav."""
    buff = io.BytesIO()
    with zipfile.ZipFile(buff, 'w', zipfile.ZIP_DEFLATED) as zf:
        for member_name, member_data in extra_members:
            zf.writestr(member_name, member_data)
        zf.writestr(Me1SaveGame.state_member, encode_record(state))
    return buff.getvalue()

def write_test_save(dir_path, file_name, save_tree):
    """Encodes save_tree and writes it to dir_path/file_name. Returns the
    path."""
    save_path = dir_path / file_name
    save_path.write_bytes(save_tree.encode_save())
    return save_path
