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
import math
import uuid

import pytest

from . import bools, make_save
from ..bosh import Game, SaveGame
from ..bosh.mass_effect_2 import Me2Henchman
from ..bosh.plot import PlotKind
from ..bosh.shared import HeadMorph, Me2Difficulty, Me3Difficulty, Origin
from ..brec import SavBoolVec, SavEnum, SavFloat, SavGuid, SavInt32, \
    SavList, SavOptional, SavString, SavStruct, SavUInt8
from ..exception import ArgumentError
from ..raw_ui import Field, FieldPath, Kind, add_item, coerce, describe, \
    describe_field, eval_field, fill_option, get_field, iter_fields, \
    remove_item, remove_option, set_field, walk

def _me2(game=Game.MassEffect2):
    save_tree = make_save(game, booleans=bools(66, size=96),
                          integers=[0, 0, 40], floats=[0.5])
    save_tree.squad = [Me2Henchman(tag='hench_garrus'),
                       Me2Henchman(tag='hench_tali')]
    return save_tree

def _me3():
    save_tree = make_save(Game.MassEffect3, integers={10: 4})
    save_tree.player_variables = {'PV_Intel': 5}
    return save_tree

class TestDescribe(object):
    @pytest.mark.parametrize('element, kind', [
        (SavString(), Kind.STRING),
        (SavUInt8(), Kind.U8),
        (SavInt32(), Kind.I32),
        (SavGuid(), Kind.GUID),
        (SavEnum('e', Origin), Kind.ENUM),
        (SavOptional('o', SavInt32()), Kind.OPTION),
        (SavList('l', SavInt32()), Kind.LIST),
        (SavBoolVec('b'), Kind.BOOL_LIST),
        (SavStruct('s', HeadMorph), Kind.STRUCT),
    ])
    def test_describe(self, element, kind):
        assert describe(element) is kind

    def test_primitive(self):
        assert Kind.I32.is_primitive
        assert not Kind.DICT.is_primitive

class TestIterFields(object):
    def test_file_order(self):
        fields = list(iter_fields(_me2()))
        assert [f.name for f in fields[:5]] == [
            'version', 'debug_name', 'seconds_played', 'disc',
            'base_level_name']
        # the display name does not exist before version 30
        assert fields[5].name == 'difficulty'
        assert fields[5] == Field('difficulty', Me2Difficulty.Normal,
                                  Kind.ENUM, fields[5].element)

    def test_gated_field(self):
        fields = {f.name: f for f in iter_fields(_me2(Game.MassEffect2Le))}
        assert fields['base_level_name_display_override_as_read'].kind is \
               Kind.STRING

    def test_kinds(self):
        fields = {f.name: f.kind for f in iter_fields(_me3())}
        assert fields['version'] is Kind.I32
        assert fields['seconds_played'] is Kind.F32
        assert fields['player'] is Kind.STRUCT
        assert fields['pawns'] is Kind.LIST
        assert fields['player_variables'] is Kind.DICT

    def test_walk(self):
        leaves = {path: (kind, value) for path, kind, value in walk(_me2())}
        assert leaves['player.level'] == (Kind.I32, 0)
        assert leaves['plot.booleans[66]'] == (Kind.BOOL, True)
        assert leaves['plot.integers[2]'] == (Kind.I32, 40)
        assert leaves['squad[1].tag'] == (Kind.STRING, 'hench_tali')
        assert 'player.head_morph' not in leaves

    def test_walk_optional_and_dict(self):
        save_tree = _me3()
        save_tree.player.head_morph = HeadMorph(hair_mesh='Hair_Long')
        leaves = {path: value for path, _k, value in walk(save_tree)}
        assert leaves['player.head_morph?.hair_mesh'] == 'Hair_Long'
        assert leaves['player_variables[PV_Intel]'] == 5
        assert leaves['plot.integers[10]'] == 4

class TestFieldPath(object):
    @pytest.mark.parametrize('bad_path', [
        '', '.player', 'player..level', 'player level', '[0]',
        'player.head_morph?', 'squad[0', 'player.9lives'])
    def test_malformed(self, bad_path):
        with pytest.raises(ArgumentError):
            FieldPath(bad_path)

    def test_get(self):
        save_tree = _me2()
        assert get_field(save_tree, 'version') == 29
        assert get_field(save_tree, 'squad[1].tag') == 'hench_tali'
        assert get_field(save_tree, 'plot.booleans[66]') is True
        assert get_field(save_tree, 'player.loadout.pistol') == ''
        assert describe_field(save_tree, 'plot.floats[0]') is Kind.F32

    def test_get_save_game(self):
        save = SaveGame(Game.MassEffect2, 'Shepard.pcsav', _me2())
        assert get_field(save, 'squad[0].tag') == 'hench_garrus'

    def test_dict_keys(self):
        save_tree = _me3()
        assert get_field(save_tree, 'plot.integers[10]') == 4
        assert get_field(save_tree, 'player_variables[PV_Intel]') == 5
        with pytest.raises(ArgumentError):
            get_field(save_tree, 'player_variables[PV_Assets]')

    def test_eval_all(self):
        save_tree = _me2()
        assert eval_field(save_tree, 'squad[*].tag') == ['hench_garrus',
                                                         'hench_tali']
        with pytest.raises(ArgumentError):
            get_field(save_tree, 'squad[*].tag')

    def test_optional(self):
        save_tree = _me2()
        assert eval_field(save_tree, 'player.head_morph?.hair_mesh') == []
        with pytest.raises(ArgumentError):
            eval_field(save_tree, 'player.head_morph.hair_mesh')
        save_tree.player.head_morph = HeadMorph(hair_mesh='Hair_Short')
        assert eval_field(save_tree, 'player.head_morph?.hair_mesh') == [
            'Hair_Short']
        assert get_field(save_tree,
                         'player.head_morph.hair_mesh') == 'Hair_Short'

    @pytest.mark.parametrize('bad_path', [
        'nonexistent', 'squad[2]', 'squad[x]', 'version[0]',
        'player.level.value', 'base_level_name_display_override_as_read'])
    def test_bad_lookup(self, bad_path):
        with pytest.raises(ArgumentError):
            get_field(_me2(), bad_path)

class TestSetField(object):
    def test_set_from_text(self):
        """Values typed in by a user are converted to the field's kind."""
        save_tree = _me2()
        assert set_field(save_tree, 'player.credits', '25000') == 1
        assert save_tree.player.credits == 25000
        set_field(save_tree, 'plot.booleans[67]', 'true')
        assert save_tree.plot.get(PlotKind.BOOLEANS, 67) is True
        set_field(save_tree, 'plot.floats[0]', '2.5')
        assert save_tree.plot.floats == [2.5]
        set_field(save_tree, 'player.origin', 'earthborn')
        assert save_tree.player.origin is Origin.Earthborn
        set_field(save_tree, 'difficulty', '4')
        assert save_tree.difficulty is Me2Difficulty.Insanity

    def test_set_all(self):
        save_tree = _me2()
        assert set_field(save_tree, 'squad[*].character_level', 30) == 2
        assert [h.character_level for h in save_tree.squad] == [30, 30]

    def test_set_dict_value(self):
        save_tree = _me3()
        set_field(save_tree, 'player_variables[PV_Intel]', '7')
        assert save_tree.player_variables == {'PV_Intel': 7}
        set_field(save_tree, 'difficulty', Me3Difficulty.Insanity)
        assert save_tree.difficulty is Me3Difficulty.Insanity

    @pytest.mark.parametrize('path, value', [
        ('player.credits', 'lots'),
        ('player.credits', 2 ** 31),
        ('plot.booleans[67]', 'maybe'),
        ('plot.floats[0]', '1e40'),
        ('plot.floats[0]', -1e39),
        ('player.origin', 'Martian'),
        ('player.origin', 9),
        ('player.loadout', 'Predator'),
        ('squad', 'everyone'),
    ])
    def test_bad_values(self, path, value):
        with pytest.raises(ArgumentError):
            set_field(_me2(), path, value)

class TestCoerce(object):
    def test_u8_clamps(self):
        assert coerce(SavUInt8(), 300) == 255
        assert coerce(SavUInt8(), '-4') == 0

    def test_f32_range(self):
        """Infinities and NaN are storable, finite values beyond the f32
        range are not."""
        assert coerce(SavFloat(), '-3.4e38') == -3.4e38
        assert coerce(SavFloat(), 'inf') == float('inf')
        assert math.isnan(coerce(SavFloat(), 'nan'))
        with pytest.raises(ArgumentError):
            coerce(SavFloat(), '3.5e38')
        with pytest.raises(ArgumentError):
            coerce(SavFloat(), -1e40)

    def test_guid(self):
        guid_text = '12345678-9abc-def0-1234-56789abcdef0'
        assert coerce(SavGuid(), guid_text) == uuid.UUID(guid_text)
        with pytest.raises(ArgumentError):
            coerce(SavGuid(), 'not a guid')

    def test_option(self):
        opt_elem = SavOptional('o', SavInt32())
        assert coerce(opt_elem, None) is None
        assert coerce(opt_elem, '5') == 5

class TestContainers(object):
    def test_list(self):
        save_tree = _me2()
        assert add_item(save_tree, 'squad') == 2
        assert save_tree.squad[2] == Me2Henchman()
        set_field(save_tree, 'squad[2].tag', 'hench_mordin')
        remove_item(save_tree, 'squad', 0)
        assert [h.tag for h in save_tree.squad] == ['hench_tali',
                                                    'hench_mordin']
        with pytest.raises(ArgumentError):
            remove_item(save_tree, 'squad', 5)

    def test_bool_list(self):
        """Bitfields grow by whole words."""
        save_tree = _me2()
        assert add_item(save_tree, 'plot.booleans') == 96
        assert len(save_tree.plot.booleans) == 128

    def test_bool_list_keeps_positions(self):
        """Removing a bit would shift every later plot id, so it is
        refused and the bitfield stays as it was."""
        save_tree = _me2()
        with pytest.raises(ArgumentError):
            remove_item(save_tree, 'plot.booleans', 10)
        assert len(save_tree.plot.booleans) == 96
        assert save_tree.plot_table.get(PlotKind.BOOLEANS, 66) is True
        assert save_tree.plot_table.get(PlotKind.BOOLEANS, 65) is False

    def test_dict(self):
        save_tree = _me3()
        assert add_item(save_tree, 'plot.integers') == -1
        assert save_tree.plot.integers == {10: 4, -1: 0}
        with pytest.raises(ArgumentError):
            add_item(save_tree, 'plot.integers')
        assert add_item(save_tree, 'player_variables', 'PV_Assets') == \
               'PV_Assets'
        assert save_tree.player_variables == {'PV_Intel': 5, 'PV_Assets': 0}
        remove_item(save_tree, 'plot.integers', '10')
        assert save_tree.plot.integers == {-1: 0}
        with pytest.raises(ArgumentError):
            remove_item(save_tree, 'plot.integers', 10)

    def test_not_a_container(self):
        with pytest.raises(ArgumentError):
            add_item(_me2(), 'player.level')
        with pytest.raises(ArgumentError):
            remove_item(_me2(), 'player', 0)

    def test_options(self):
        save_tree = _me2()
        head_morph = fill_option(save_tree, 'player.head_morph')
        assert head_morph == HeadMorph()
        assert save_tree.player.head_morph is head_morph
        # filling again keeps the existing value
        assert fill_option(save_tree, 'player.head_morph') is head_morph
        remove_option(save_tree, 'player.head_morph')
        assert save_tree.player.head_morph is None
        with pytest.raises(ArgumentError):
            remove_option(save_tree, 'player.level')
