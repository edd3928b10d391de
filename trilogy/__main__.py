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
"""This module starts the editor in console mode: it parses the command line,
loads the settings and runs the requested command."""
from __future__ import annotations

import sys

from . import barg, bass, raw_ui
from .bolt import deprint
from .bosh import open_save, write_save
from .bosh.compare import compare
from .bosh.plot import PlotDb, label_list
from .exception import BoltError

def _cmd_compare(opts):
    report_path = compare(opts.source, opts.target, opts.out_dir,
                          src_game=opts.game,
                          cmp_game=opts.target_game or opts.game,
                          timeout=opts.timeout)
    print(f'Wrote {report_path}')

def _cmd_dump(opts):
    save = open_save(opts.save, opts.game)
    for field_path, kind, value in raw_ui.walk(save):
        if field_path.startswith(opts.path):
            print(f'{field_path} ({kind.value}) = {_show(value)}')

def _show(value):
    if isinstance(value, bytes):
        return f'<{len(value)} bytes>'
    return f'{getattr(value, "name", value)}'

def _cmd_plot(opts):
    save = open_save(opts.save, opts.game)
    if label_db_path := (opts.label_db or bass.settings['Plot']['label_db']):
        plot_db = PlotDb.from_yaml(label_db_path)
    else:
        plot_db = PlotDb()
    plot_table = save.plot_table
    for plot_id, label in label_list(plot_table, plot_db, opts.kind,
                                     opts.text_filter):
        value = plot_table.get(opts.kind, plot_id)
        value_str = '-' if value is None else f'{value}'
        print(f'{plot_id:>6} {value_str:>12}  {label or ""}'.rstrip())

def _cmd_set(opts):
    save = open_save(opts.save, opts.game)
    fields_set = raw_ui.set_field(save, opts.path, opts.value)
    out_path = opts.output or opts.save
    write_save(out_path, save)
    print(f'Set {fields_set} field(s), wrote {out_path}')

_commands = {
    'compare': _cmd_compare,
    'dump': _cmd_dump,
    'plot': _cmd_plot,
    'set': _cmd_set,
}

def main(argv=None):
    opts = barg.parse(argv)
    try:
        if opts.settings:
            bass.load_settings(opts.settings)
        _commands[opts.command](opts)
    except BoltError as e:
        deprint(f'{opts.command} failed', traceback=True)
        print(f'Error: {e}', file=sys.stderr)
        return 1
    return 0

if __name__ == '__main__':
    sys.exit(main())
