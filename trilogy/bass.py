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
"""This module just stores some data that all modules have to be able to access
without worrying about circular imports, most importantly the settings read
from the settings TOML file."""
from __future__ import annotations

import copy
import tomllib

from . import bolt
from .bolt import deprint
from .exception import FileError

AppVersion = '2.1'

#--Global dictionaries - do _not_ reassign !
# Settings read from the settings.toml file, see load_settings. Sections and
# keys missing from the file are filled in from settings_defaults
settings_defaults = {
    'General': {
        # Game to assume for saves whose extension several games share
        # (.pcsav). One of the Game short names, e.g. 'me3'
        'game': '',
        # Encoding tried first for single byte strings in saves
        'save_encoding': 'cp1252',
        # Raise on checksum mismatches instead of just logging them
        'strict_checksums': False,
    },
    'Compare': {
        'report_name': 'compare_result.yaml',
        # Seconds to wait for both saves to open, 0 waits forever
        'timeout': 0,
    },
    'Plot': {
        # YAML file with labels for plot ids
        'label_db': '',
    },
}
settings = copy.deepcopy(settings_defaults)

def reset_settings():
    """Restores the defaults, mainly for tests."""
    settings.clear()
    settings.update(copy.deepcopy(settings_defaults))
    bolt.saveEncoding = settings['General']['save_encoding']

def load_settings(toml_path):
    """Reads the specified TOML file over the defaults. Unknown sections and
    keys are logged and ignored, values of the wrong type raise a
    FileError."""
    try:
        with open(toml_path, 'rb') as ins:
            parsed = tomllib.load(ins)
    except OSError as e:
        deprint(f'Failed to read settings file {toml_path}', traceback=True)
        raise FileError(toml_path, f'Could not read settings file: {e}') \
            from e
    except tomllib.TOMLDecodeError as e:
        deprint(f'{toml_path} has malformed TOML syntax', traceback=True)
        raise FileError(toml_path, f'Malformed settings file: {e}') from e
    reset_settings()
    for sect_key, sect_vals in parsed.items():
        if sect_key not in settings_defaults or not isinstance(sect_vals,
                                                               dict):
            deprint(f'{toml_path}: ignoring unknown section {sect_key!r}')
            continue
        for sett_key, sett_val in sect_vals.items():
            try:
                dflt = settings_defaults[sect_key][sett_key]
            except KeyError:
                deprint(f'{toml_path}: ignoring unknown setting '
                        f'{sect_key}.{sett_key}')
                continue
            if type(sett_val) is not type(dflt) and not (
                    type(dflt) is int and type(sett_val) is float):
                raise FileError(toml_path, f'{sect_key}.{sett_key} should '
                                           f'be of type '
                                           f'{type(dflt).__name__}, not '
                                           f'{type(sett_val).__name__}')
            settings[sect_key][sett_key] = sett_val
    bolt.saveEncoding = settings['General']['save_encoding']
    return settings
