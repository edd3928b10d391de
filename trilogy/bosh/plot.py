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
"""Plot tables: the boolean, integer and float flags the games track the
story with. Each flag is addressed by a small integer id. Depending on the
title a flag space is dense (a list, the id is the index) or sparse (a dict
of only the allocated ids). Also houses PlotDb, the catalog of labels for
those ids."""
from __future__ import annotations

from enum import Enum

import yaml

from ..bolt import deprint
from ..brec import BoolVec, SavBool, SavBoolVec, SavDict, SavFloat, \
    SavInt32, SavList, SaveRecord, SavSet, SavStruct
from ..exception import FileError

# Try to use the C version (way faster), if that isn't possible fall back to
# the pure Python version
try:
    from yaml import CSafeLoader as SafeLoader
except ImportError:
    from yaml import SafeLoader
    deprint('Failed to import LibYAML-based parser, falling back to Python '
            'version')

class PlotKind(Enum):
    """The three flag spaces of a plot table. The values are the attribute
    names the spaces are stored under."""
    BOOLEANS = 'booleans'
    INTEGERS = 'integers'
    FLOATS = 'floats'

    @property
    def default(self):
        return _kind_defaults[self]

    def coerce(self, value):
        """Converts value to the type stored in this flag space."""
        return type(self.default)(value)

_kind_defaults = {PlotKind.BOOLEANS: False, PlotKind.INTEGERS: 0,
                  PlotKind.FLOATS: 0.0}

#------------------------------------------------------------------------------
class _APlotTable(object):
    """Access to the flag spaces of a plot table, whatever their storage.
    The domain of a space is fixed by what was decoded; reading or writing an
    unknown id never grows it, only extend does."""
    __slots__ = ()

    def _space(self, kind) -> list | dict:
        return getattr(self, PlotKind(kind).value)

    def is_sparse(self, kind):
        return isinstance(self._space(kind), dict)

    def ids(self, kind) -> list[int]:
        """Returns all allocated ids of the given flag space, ascending."""
        space = self._space(kind)
        if isinstance(space, dict):
            return sorted(space)
        return list(range(len(space)))

    def get(self, kind, plot_id):
        """Returns the value of the given flag, or None if it is not
        allocated."""
        space = self._space(kind)
        if isinstance(space, dict):
            return space.get(plot_id)
        return space[plot_id] if 0 <= plot_id < len(space) else None

    def set(self, kind, plot_id, value) -> bool:
        """Sets the value of the given flag if it is allocated. Returns True if
        it was."""
        kind = PlotKind(kind)
        space = self._space(kind)
        if isinstance(space, dict):
            if plot_id not in space: return False
        elif not 0 <= plot_id < len(space):
            return False
        space[plot_id] = kind.coerce(value)
        return True

    def extend(self, kind, known_ids):
        """Allocates every id in known_ids that is missing, with the default
        value of the flag space. Existing flags are never touched."""
        kind = PlotKind(kind)
        space = self._space(kind)
        if not known_ids: return
        if isinstance(space, dict):
            for plot_id in sorted(known_ids):
                space.setdefault(plot_id, kind.default)
        elif isinstance(space, BoolVec):
            space.grow_to(max(known_ids) + 1)
        elif (new_len := max(known_ids) + 1) > len(space):
            space.extend([kind.default] * (new_len - len(space)))

# Plot records ----------------------------------------------------------------
class PlotQuest(SaveRecord):
    save_set = SavSet(
        SavInt32('quest_counter'),
        SavBool('quest_updated'),
        SavList('history', SavInt32()),
    )

class PlotCodexPage(SaveRecord):
    save_set = SavSet(
        SavInt32('page'),
        SavBool('is_new'),
    )

class PlotCodex(SaveRecord):
    save_set = SavSet(
        SavList('pages', SavStruct('_unused', PlotCodexPage)),
    )

def _quest_elements():
    """The quest and codex sections that follow the flags in ME2 and ME3."""
    return (
        SavInt32('quest_progress_counter'),
        SavList('quest_progress', SavStruct('_unused', PlotQuest)),
        SavList('quest_ids', SavInt32()),
        SavList('codex_entries', SavStruct('_unused', PlotCodex)),
        SavList('codex_ids', SavInt32()),
    )

class Me1PlotTable(_APlotTable, SaveRecord):
    """Dense plot table of ME1, also embedded in ME2 and ME3 saves for the
    choices imported from ME1."""
    save_set = SavSet(
        SavBoolVec('booleans'),
        SavList('integers', SavInt32()),
        SavList('floats', SavFloat()),
    )

class Me2PlotTable(_APlotTable, SaveRecord):
    save_set = SavSet(
        SavBoolVec('booleans'),
        SavList('integers', SavInt32()),
        SavList('floats', SavFloat()),
        *_quest_elements(),
    )

class Me3PlotTable(_APlotTable, SaveRecord):
    """ME3 stores only the integer and float flags that were ever set."""
    save_set = SavSet(
        SavBoolVec('booleans'),
        SavDict('integers', SavInt32(), SavInt32()),
        SavDict('floats', SavInt32(), SavFloat()),
        *_quest_elements(),
    )

#------------------------------------------------------------------------------
class PlotDb(object):
    """Catalog of human readable labels for plot ids, grouped by category.
    The YAML layout is {category: {booleans|integers|floats: {id: label}}}."""

    def __init__(self, categories=None):
        self.categories: dict[str, dict[PlotKind, dict[int, str]]] = \
            categories or {}

    @classmethod
    def from_yaml(cls, yaml_path):
        """Parses the specified YAML file. Unreadable or malformed files raise a
        FileError."""
        try:
            with open(yaml_path, 'rb') as ins:
                db_contents = yaml.load(ins, Loader=SafeLoader)
        except OSError as e:
            deprint(f'Failed to read plot database {yaml_path}',
                    traceback=True)
            raise FileError(yaml_path, f'Could not read plot database: '
                                       f'{e}') from e
        except yaml.YAMLError as e:
            deprint(f'Error when parsing plot database {yaml_path}',
                    traceback=True)
            raise FileError(yaml_path, 'Malformed plot database') from e
        return cls(cls._parse_categories(yaml_path, db_contents or {}))

    @staticmethod
    def _parse_categories(yaml_path, db_contents):
        if not isinstance(db_contents, dict):
            raise FileError(yaml_path, 'Expected a mapping of categories')
        categories = {}
        for cat_name, cat_data in db_contents.items():
            parsed = categories[f'{cat_name}'] = {}
            for kind in PlotKind:
                labels = (cat_data or {}).get(kind.value) or {}
                try:
                    parsed[kind] = {int(k): f'{v}' for k, v in labels.items()}
                except (AttributeError, TypeError, ValueError) as e:
                    raise FileError(yaml_path, f'{cat_name}.{kind.value}: '
                                               f'expected a mapping of plot '
                                               f'ids to labels') from e
        return categories

    def labels(self, kind) -> dict[int, str]:
        """All labels of the given flag space, across categories."""
        kind = PlotKind(kind)
        return {plot_id: label for cat in self.categories.values()
                for plot_id, label in cat.get(kind, {}).items()}

    def known_ids(self, kind) -> set[int]:
        return set(self.labels(kind))

    def label(self, kind, plot_id):
        return self.labels(kind).get(plot_id)

def add_missing_plots(plot_table: _APlotTable, plot_db: PlotDb):
    """Extends every flag space of plot_table with the ids plot_db knows
    about."""
    for kind in PlotKind:
        plot_table.extend(kind, plot_db.known_ids(kind))

def label_list(plot_table: _APlotTable, plot_db: PlotDb, kind,
               text_filter=''):
    """Returns (plot id, label or None) pairs for every id either the table
    or the database knows, sorted by id. If text_filter is given, only rows
    whose label contains it (case insensitive) or whose id contains it are
    kept."""
    kind = PlotKind(kind)
    labels = dict.fromkeys(plot_table.ids(kind))
    labels.update(plot_db.labels(kind))
    rows = sorted(labels.items())
    if text_filter:
        text_filter = text_filter.lower()
        rows = [(i, l) for i, l in rows if (l and text_filter in l.lower())
                or text_filter in f'{i}']
    return rows
