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
import pytest
import yaml

from . import bools, make_save, write_test_save
from .. import bass
from ..__main__ import main
from ..barg import parse
from ..bosh import Game, open_save

def _write_pair(tmp_path):
    src = make_save(Game.MassEffect2, booleans=bools(size=96),
                    integers=[0, 0, 10], floats=[])
    cmp = make_save(Game.MassEffect2, booleans=bools(66, size=96),
                    integers=[0, 0, 20], floats=[])
    return (write_test_save(tmp_path, 'src.pcsav', src),
            write_test_save(tmp_path, 'cmp.pcsav', cmp))

class TestParse(object):
    def test_compare(self):
        opts = parse(['--game', 'me2', 'compare', 'a.pcsav', 'b.pcsav',
                      '-t', '5'])
        assert opts.command == 'compare'
        assert (opts.source, opts.target) == ('a.pcsav', 'b.pcsav')
        assert opts.game == 'me2'
        assert opts.timeout == 5.0
        assert opts.out_dir is None

    def test_plot_defaults(self):
        opts = parse(['plot', 'a.pcsav'])
        assert opts.kind == 'booleans'
        assert opts.text_filter == ''
        assert opts.label_db is None

    def test_missing_command(self):
        with pytest.raises(SystemExit):
            parse([])

    def test_bad_kind(self):
        with pytest.raises(SystemExit):
            parse(['plot', 'a.pcsav', '--kind', 'strings'])

class TestMain(object):
    def teardown_method(self):
        bass.reset_settings()

    def test_compare(self, tmp_path, capsys):
        src_path, cmp_path = _write_pair(tmp_path)
        assert main(['-g', 'me2', 'compare', str(src_path), str(cmp_path),
                     '-o', str(tmp_path)]) == 0
        report_path = tmp_path / 'compare_result.yaml'
        assert f'Wrote {report_path}' in capsys.readouterr().out
        report = yaml.safe_load(report_path.read_text(encoding='utf-8'))
        assert report['booleans'] == {66: {'src': False, 'cmp': True}}

    def test_dump(self, tmp_path, capsys):
        _src_path, cmp_path = _write_pair(tmp_path)
        assert main(['-g', 'me2', 'dump', str(cmp_path), 'plot.']) == 0
        out_lines = capsys.readouterr().out.splitlines()
        assert 'plot.booleans[66] (bool) = True' in out_lines
        assert 'plot.integers[2] (i32) = 20' in out_lines
        assert all(l.startswith('plot.') for l in out_lines)

    def test_plot(self, tmp_path, capsys):
        _src_path, cmp_path = _write_pair(tmp_path)
        db_path = tmp_path / 'plots.yaml'
        db_path.write_text('Player:\n  booleans:\n    66: Is female\n',
                           encoding='utf-8')
        assert main(['-g', 'me2', 'plot', str(cmp_path), '--db',
                     str(db_path), '-f', 'female']) == 0
        assert capsys.readouterr().out.split() == ['66', 'True', 'Is',
                                                   'female']

    def test_set(self, tmp_path, capsys):
        _src_path, cmp_path = _write_pair(tmp_path)
        out_path = tmp_path / 'edited.pcsav'
        assert main(['-g', 'me2', 'set', str(cmp_path), 'player.credits',
                     '1234', '-o', str(out_path)]) == 0
        assert 'Set 1 field(s)' in capsys.readouterr().out
        assert open_save(out_path, 'me2').save_game.player.credits == 1234
        # the original is left alone
        assert open_save(cmp_path, 'me2').save_game.player.credits == 0

    def test_settings(self, tmp_path, capsys):
        """The game can come from the settings file."""
        src_path, _cmp_path = _write_pair(tmp_path)
        settings_path = tmp_path / 'settings.toml'
        settings_path.write_text('[General]\ngame = "me2"\n',
                                 encoding='utf-8')
        assert main(['--settings', str(settings_path), 'dump',
                     str(src_path), 'version']) == 0
        assert capsys.readouterr().out == 'version (i32) = 29\n'

    def test_error(self, tmp_path, capsys):
        """Errors are reported and turned into an exit code."""
        src_path, _cmp_path = _write_pair(tmp_path)
        assert main(['-g', 'me2', 'set', str(src_path), 'player.nothing',
                     '1']) == 1
        assert 'Error: ' in capsys.readouterr().err

    def test_missing_settings(self, tmp_path, capsys):
        src_path, _cmp_path = _write_pair(tmp_path)
        assert main(['--settings', str(tmp_path / 'missing.toml'), 'dump',
                     str(src_path)]) == 1
        assert 'Could not read settings file' in capsys.readouterr().err

    def test_float_out_of_range(self, tmp_path, capsys):
        """A float the save cannot hold is reported, not written."""
        src_path, _cmp_path = _write_pair(tmp_path)
        before = src_path.read_bytes()
        assert main(['-g', 'me2', 'set', str(src_path),
                     'seconds_played', '1e40']) == 1
        assert 'out of range' in capsys.readouterr().err
        assert src_path.read_bytes() == before
