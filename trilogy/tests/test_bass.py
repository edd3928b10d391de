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

from .. import bass, bolt
from ..exception import FileError

def _load(tmp_path, toml_text):
    settings_path = tmp_path / 'settings.toml'
    settings_path.write_text(toml_text, encoding='utf-8')
    return bass.load_settings(settings_path)

class TestLoadSettings(object):
    def teardown_method(self):
        bass.reset_settings()

    def test_defaults(self, tmp_path):
        """Anything the file does not set keeps its default."""
        settings = _load(tmp_path, '')
        assert settings == bass.settings_defaults
        assert settings is bass.settings

    def test_values(self, tmp_path):
        _load(tmp_path, '[General]\n'
                        'game = "me2le"\n'
                        'save_encoding = "cp1251"\n'
                        '[Compare]\n'
                        'timeout = 2.5\n')
        assert bass.settings['General']['game'] == 'me2le'
        assert bass.settings['Compare']['timeout'] == 2.5
        assert bass.settings['Compare']['report_name'] == \
               'compare_result.yaml'
        assert bolt.saveEncoding == 'cp1251'

    def test_reload_resets(self, tmp_path):
        _load(tmp_path, '[General]\ngame = "me3"\n')
        _load(tmp_path, '[Plot]\nlabel_db = "plots.yaml"\n')
        assert bass.settings['General']['game'] == ''
        assert bass.settings['Plot']['label_db'] == 'plots.yaml'

    def test_unknown_keys(self, tmp_path, capsys):
        """Unknown sections and keys are logged and skipped."""
        _load(tmp_path, '[Colors]\nred = 1\n[General]\nfoo = true\n')
        assert 'Colors' not in bass.settings
        assert 'foo' not in bass.settings['General']
        out = capsys.readouterr().out
        assert "unknown section 'Colors'" in out
        assert 'unknown setting General.foo' in out

    def test_wrong_type(self, tmp_path):
        with pytest.raises(FileError) as exc_info:
            _load(tmp_path, '[General]\nstrict_checksums = "yes"\n')
        assert 'General.strict_checksums' in str(exc_info.value)

    def test_malformed(self, tmp_path, capsys):
        with pytest.raises(FileError) as exc_info:
            _load(tmp_path, '[General\ngame = me2\n')
        assert 'Malformed settings file' in str(exc_info.value)
        assert 'malformed TOML syntax' in capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys):
        """A settings file that cannot be read is a FileError too."""
        with pytest.raises(FileError) as exc_info:
            bass.load_settings(tmp_path / 'missing.toml')
        assert 'Could not read settings file' in str(exc_info.value)
        assert 'missing.toml' in capsys.readouterr().err
