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
"""The data model of the three games: per-title save trees, plot tables and
the open/save entry points that pick the right tree for a file."""
from __future__ import annotations

import os
from enum import Enum

from .mass_effect_1 import ME1_LE_VERSION, Me1LeSaveGame, Me1SaveGame
from .mass_effect_2 import ME2_LE_VERSION, ME2_VERSION, Me2SaveGame
from .mass_effect_3 import ME3_VERSION, Me3SaveGame
from .. import bass
from ..bolt import deprint, struct_error
from ..exception import ArgumentError, SaveFileError, SaveHeaderError

class Game(Enum):
    """The titles (and editions) we can open. Each member knows its display
    name, short name, save extension, root record type and the format
    versions it writes (empty if the format has no version field)."""
    MassEffect1 = ('Mass Effect 1', 'me1', '.MassEffectSave', Me1SaveGame,
                   ())
    MassEffect1Le = ('Mass Effect 1 Legendary Edition', 'me1le', '.pcsav',
                     Me1LeSaveGame, (ME1_LE_VERSION,))
    MassEffect2 = ('Mass Effect 2', 'me2', '.pcsav', Me2SaveGame,
                   (ME2_VERSION,))
    MassEffect2Le = ('Mass Effect 2 Legendary Edition', 'me2le', '.pcsav',
                     Me2SaveGame, (ME2_LE_VERSION,))
    MassEffect3 = ('Mass Effect 3', 'me3', '.pcsav', Me3SaveGame,
                   (ME3_VERSION,))

    def __init__(self, display_name, short_name, save_ext, root_type,
                 versions):
        self.display_name = display_name
        self.short_name = short_name
        self.save_ext = save_ext
        self.root_type = root_type
        self.versions = versions

    @classmethod
    def from_name(cls, game_name: str) -> Game:
        """Looks up a game by short name ('me2le') or member name
        ('MassEffect2Le'), case insensitively."""
        game_key = game_name.lower()
        for game in cls:
            if game_key in (game.short_name, game.name.lower()):
                return game
        raise ArgumentError(f"Unknown game '{game_name}', expected one of "
                            f"{', '.join(g.short_name for g in cls)}")

    def new_save(self):
        """Returns a default save tree for this game."""
        if self.versions:
            return self.root_type(version=self.versions[-1])
        return self.root_type()

    def check_version(self, in_name, save_game):
        if self.versions and save_game.version not in self.versions:
            raise SaveHeaderError(in_name, f'Version {save_game.version} is '
                                           f'not a {self.display_name} save')

def resolve_game(save_path, game=None) -> Game:
    """Picks the game to decode save_path as: the one the caller selected,
    else the only game using its extension, else the configured default.
    The file contents are never looked at."""
    if game is not None:
        return game if isinstance(game, Game) else Game.from_name(game)
    save_ext = os.path.splitext(f'{save_path}')[1].lower()
    if len(candidates := [g for g in Game
                          if g.save_ext.lower() == save_ext]) == 1:
        return candidates[0]
    if dflt_game := bass.settings['General']['game']:
        return Game.from_name(dflt_game)
    raise ArgumentError(f'Cannot tell which game {save_path} belongs to, '
                        f'please select one of '
                        f"{', '.join(g.short_name for g in Game)}")

class SaveGame(object):
    """A decoded save tree together with the game it belongs to and the path
    it was read from. This is the closed set of save variants callers
    dispatch on."""
    __slots__ = ('game', 'file_path', 'save_game')

    def __init__(self, game: Game, file_path, save_game):
        self.game = game
        self.file_path = file_path
        self.save_game = save_game

    @property
    def plot_table(self):
        """The plot table of this save (for ME1 the one in the state, for the
        others the top level one)."""
        return self.save_game.plot_table

    def __repr__(self):
        return f'{type(self).__name__}({self.game.name}, {self.file_path!r})'

def open_save(save_path, game=None, *, strict=None) -> SaveGame:
    """Reads and decodes the save at save_path. game may be a Game or its
    name; if omitted, see resolve_game. strict overrides the
    General.strict_checksums setting."""
    game = resolve_game(save_path, game)
    if strict is None:
        strict = bass.settings['General']['strict_checksums']
    try:
        with open(save_path, 'rb') as ins:
            save_data = ins.read()
    except OSError as e:
        err_msg = f'Failed to read {save_path}'
        deprint(err_msg, traceback=True)
        raise SaveFileError(save_path, f'{err_msg}: {e}') from e
    save_game = game.root_type.decode_save(save_path, save_data,
                                           strict=strict)
    game.check_version(save_path, save_game)
    return SaveGame(game, os.fspath(save_path), save_game)

def write_save(save_path, save: SaveGame):
    """Encodes save and writes it to save_path, via a temporary file so that
    a failed write never leaves a half written save behind."""
    try:
        save_data = save.save_game.encode_save()
    except (struct_error, OverflowError) as e:
        deprint(f'Failed to encode {save!r}', traceback=True)
        raise SaveFileError(save_path, f'A value is out of range: {e}') \
            from e
    tmp_path = f'{save_path}.tmp'
    try:
        with open(tmp_path, 'wb') as out:
            out.write(save_data)
        os.replace(tmp_path, save_path)
    except OSError as e:
        err_msg = f'Failed to write {save_path}'
        deprint(err_msg, traceback=True)
        raise SaveFileError(save_path, f'{err_msg}: {e}') from e
