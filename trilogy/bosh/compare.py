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
"""Compares the plot tables of two saves and writes the differences to a YAML
report."""
from __future__ import annotations

import math
import os
import queue
import threading
from typing import NamedTuple

import yaml

from . import open_save
from .plot import PlotKind
from .. import bass
from ..bolt import deprint
from ..exception import ArgumentError, CompareError

# Try to use the C version (way faster), if that isn't possible fall back to
# the pure Python version
try:
    from yaml import CSafeDumper as SafeDumper
except ImportError:
    from yaml import SafeDumper

_SOURCE, _TARGET = 'source', 'target'

class Difference(NamedTuple):
    """The values of one plot flag in both saves, None if a save lacks it."""
    src: bool | int | float | None
    cmp: bool | int | float | None

class Differences(object):
    """Per flag space, the plot ids whose values differ, ascending."""
    __slots__ = ('booleans', 'integers', 'floats')

    def __init__(self, booleans=None, integers=None, floats=None):
        self.booleans: dict[int, Difference] = booleans or {}
        self.integers: dict[int, Difference] = integers or {}
        self.floats: dict[int, Difference] = floats or {}

    def __getitem__(self, kind):
        return getattr(self, PlotKind(kind).value)

    def __bool__(self):
        return bool(self.booleans or self.integers or self.floats)

    def __eq__(self, other):
        if not isinstance(other, Differences):
            return NotImplemented
        return all(list(self[k].items()) == list(other[k].items())
                   for k in PlotKind)

    def __repr__(self):
        return f'{type(self).__name__}(booleans={self.booleans!r}, ' \
               f'integers={self.integers!r}, floats={self.floats!r})'

    def to_dict(self):
        """Plain data for serialization: {kind: {id: {src:, cmp:}}}."""
        return {k.value: {plot_id: {'src': d.src, 'cmp': d.cmp}
                          for plot_id, d in self[k].items()}
                for k in PlotKind}

def _same(src_val, cmp_val):
    if src_val is None or cmp_val is None:
        return src_val is cmp_val
    if isinstance(src_val, float) and isinstance(cmp_val, float) and \
            math.isnan(src_val) and math.isnan(cmp_val):
        return True
    return src_val == cmp_val

def compare_plots(src_plot, cmp_plot) -> Differences:
    """Diffs two plot tables. For each flag space, every id known to either
    table is checked, in ascending order; a flag one table lacks differs from
    any value the other one has. Neither table is modified."""
    diffs = Differences()
    for kind in PlotKind:
        found = diffs[kind]
        all_ids = sorted({*src_plot.ids(kind), *cmp_plot.ids(kind)})
        for plot_id in all_ids:
            src_val = src_plot.get(kind, plot_id)
            cmp_val = cmp_plot.get(kind, plot_id)
            if not _same(src_val, cmp_val):
                found[plot_id] = Difference(src_val, cmp_val)
    return diffs

def compare_saves(src_save, cmp_save) -> Differences:
    """Projects two decoded saves to their plot tables and diffs those."""
    return compare_plots(src_save.plot_table, cmp_save.plot_table)

def write_report(diffs: Differences, out_path):
    """Writes diffs as indented YAML with one mapping per flag space."""
    with open(out_path, 'w', encoding='utf-8') as out:
        yaml.dump(diffs.to_dict(), out, Dumper=SafeDumper, sort_keys=False,
                  default_flow_style=False, indent=2)

# Opening both saves ----------------------------------------------------------
def _resolved(save_path):
    return os.path.normcase(os.path.realpath(save_path))

def _open_worker(events: queue.Queue, save_path, game, opener):
    """Opens one save and reports the outcome as an event. Failures of any
    kind are handed over to the waiting thread."""
    try:
        events.put(('opened', save_path, opener(save_path, game)))
    except Exception as e:
        events.put(('error', save_path, e))

def open_both(src_path, cmp_path, src_game=None, cmp_game=None, *,
              timeout=None, opener=open_save):
    """Opens two saves at once and waits for both. The opens run on their
    own threads and report through a single queue in whatever order they
    finish; each completion is matched to its request by resolved path. The
    first failure aborts the whole operation with a CompareError naming the
    side that failed. timeout is in seconds, None or 0 waits forever."""
    if timeout is not None and timeout < 0:
        raise ArgumentError(f'timeout must not be negative (got '
                            f'{timeout})')
    events = queue.Queue()
    requests = [(_SOURCE, _resolved(src_path)),
                (_TARGET, _resolved(cmp_path))]
    for save_path, game in ((src_path, src_game), (cmp_path, cmp_game)):
        threading.Thread(target=_open_worker, daemon=True,
                         args=(events, save_path, game, opener)).start()
    opened = {}
    while len(opened) < 2:
        try:
            status, save_path, result = events.get(timeout=timeout or None)
        except queue.Empty:
            waiting = [s for s, _p in requests if s not in opened]
            raise CompareError(waiting[0] if len(waiting) == 1 else None,
                               f'Timed out after {timeout} seconds waiting '
                               f'for the saves to open')
        resolved = _resolved(save_path)
        # the same file may be compared against itself
        side = next((s for s, p in requests
                     if p == resolved and s not in opened), None)
        if side is None:
            deprint(f'Ignoring unexpected open result for {save_path}')
            continue
        if status == 'error':
            raise CompareError(side, f'{result}') from result
        opened[side] = result
    return opened[_SOURCE], opened[_TARGET]

def compare(src_path, cmp_path, out_dir=None, src_game=None, cmp_game=None,
            *, timeout=None, opener=open_save):
    """Opens both saves, diffs their plot tables and writes the report to
    out_dir (the current directory by default). Returns the report path."""
    if timeout is None:
        timeout = bass.settings['Compare']['timeout']
    src_save, cmp_save = open_both(src_path, cmp_path, src_game,
                                   cmp_game or src_game, timeout=timeout,
                                   opener=opener)
    diffs = compare_saves(src_save, cmp_save)
    out_path = os.path.join(out_dir or os.getcwd(),
                            bass.settings['Compare']['report_name'])
    write_report(diffs, out_path)
    return out_path
