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
"""This module parses the command line the editor was started with."""

import argparse

from .bass import AppVersion
from .bosh.plot import PlotKind

def parse(argv=None):
    """Helper function to define commandline arguments"""
    parser = argparse.ArgumentParser(prog='trilogy-save-editor',
        description='Inspect, edit and compare Mass Effect trilogy saves.')

    #### Individual Arguments ####
    parser.add_argument('-g', '--game',
                        action='store',
                        default=None,
                        dest='game',
                        help='Which game the saves belong to (me1, me1le, '
                             'me2, me2le or me3). Only needed for .pcsav '
                             'saves, which several games share, and only if '
                             'General.game is not set in the settings.')
    parser.add_argument('-s', '--settings',
                        action='store',
                        default=None,
                        dest='settings',
                        help='Path to a settings TOML file.')
    parser.add_argument('--version', action='version',
                        version=f'%(prog)s {AppVersion}')

    #### Commands ####
    commands = parser.add_subparsers(dest='command', metavar='COMMAND')
    commands.required = True
    # compare #
    h = ('Compare the plot tables of two saves and write the differences to '
         'a YAML report.')
    cmd = commands.add_parser('compare', help=h, description=h)
    cmd.add_argument('source', help='The save to compare from.')
    cmd.add_argument('target', help='The save to compare against.')
    cmd.add_argument('-o', '--out-dir', dest='out_dir', default=None,
                     help='Directory to write the report to. Defaults to '
                          'the current directory.')
    cmd.add_argument('--target-game', dest='target_game', default=None,
                     help='Game of the target save, if it differs from '
                          '--game.')
    cmd.add_argument('-t', '--timeout', type=float, default=None,
                     help='Seconds to wait for both saves to open, 0 waits '
                          'forever. Overrides Compare.timeout.')
    # dump #
    h = 'Print the fields of a save, one per line.'
    cmd = commands.add_parser('dump', help=h, description=h)
    cmd.add_argument('save', help='The save to dump.')
    cmd.add_argument('path', nargs='?', default='',
                     help="Only print fields whose path starts with this, "
                          "e.g. 'player' or 'squad[0]'.")
    # plot #
    h = 'List the flags of the plot table of a save.'
    cmd = commands.add_parser('plot', help=h, description=h)
    cmd.add_argument('save', help='The save whose plot table to list.')
    cmd.add_argument('-k', '--kind', choices=[k.value for k in PlotKind],
                     default=PlotKind.BOOLEANS.value,
                     help='Which flag space to list.')
    cmd.add_argument('-f', '--filter', dest='text_filter', default='',
                     help='Only list flags whose id or label contains this.')
    cmd.add_argument('--db', dest='label_db', default=None,
                     help='YAML file with labels for plot ids. Overrides '
                          'Plot.label_db.')
    # set #
    h = 'Set a field of a save and write the save back.'
    cmd = commands.add_parser('set', help=h, description=h)
    cmd.add_argument('save', help='The save to edit.')
    cmd.add_argument('path', help="Path of the field(s) to set, e.g. "
                                  "'player.credits' or 'plot.booleans[66]'.")
    cmd.add_argument('value', help='The new value.')
    cmd.add_argument('-o', '--output', default=None,
                     help='Write the edited save here instead of over the '
                          'original.')
    return parser.parse_args(argv)
