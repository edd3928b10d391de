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
"""Houses the SavSet and the SaveRecord base class every composite save entity
derives from."""
from __future__ import annotations

import copy

from .basic_elements import SaveElement
from .save_io import SaveReader, SaveWriter
from ..bolt import deprint

#------------------------------------------------------------------------------
class SavSet(object):
    """Ordered set of save elements. The order the elements are passed in is
    the order they are laid out in the file, with no padding in between."""

    def __init__(self, *elements: SaveElement):
        # Filter out None, produced by conditional definitions
        self.elements = [e for e in elements if e is not None]

    def getSlotsUsed(self):
        """Returns the record attributes these elements fill, in file
        order."""
        return list(dict.fromkeys(s for element in self.elements
                                  for s in element.getSlotsUsed()))

    def check_duplicate_attrs(self, rec_name):
        """Two elements filling the same attribute would silently overwrite
        each other, so refuse to build such a record type."""
        seen = set()
        for element in self.elements:
            if clash := seen.intersection(element.getSlotsUsed()):
                raise SyntaxError(f'{rec_name}: attribute(s) '
                                  f'{sorted(clash)} are filled by more than '
                                  f'one element')
            seen.update(element.getSlotsUsed())

    @property
    def min_size(self):
        return sum(element.min_size for element in self.elements)

    def setDefault(self, record):
        for element in self.elements:
            element.setDefault(record)

    def load_sav(self, record, ins: SaveReader, *debug_strs):
        """Loads every element in order into record."""
        for element in self.elements:
            element.load_sav(record, ins, *debug_strs)

    def dump_sav(self, record, out: SaveWriter):
        """Dumps every element of record in order into out."""
        for element in self.elements:
            try:
                element.dump_sav(record, out)
            except Exception:
                deprint(f'Error dumping {type(record).__name__}: element '
                        f'{element!r} with value '
                        f'{getattr(record, element.attr, None)!r}')
                raise

#------------------------------------------------------------------------------
# Records ---------------------------------------------------------------------
#------------------------------------------------------------------------------
class RecordType(type):
    """Metaclass responsible for adding slots in SaveRecord type instances,
    one for each attribute the record's save_set uses."""

    def __new__(cls, name, bases, classdict):
        slots = classdict.get('__slots__', ())
        classdict['__slots__'] = (*slots, *save_set.getSlotsUsed()) if (
            save_set := classdict.get('save_set', ())) else slots
        if save_set:
            save_set.check_duplicate_attrs(name)
        return super(RecordType, cls).__new__(cls, name, bases, classdict)

class SaveRecord(metaclass=RecordType):
    """A composite save entity: the ordered concatenation of the elements in
    its save_set. Subclasses only need to declare save_set, the metaclass
    takes care of the rest."""
    __slots__ = ()
    save_set = SavSet()

    def __init__(self, **kwargs):
        """Creates a record with all fields at their defaults, except for the
        ones passed in kwargs. Fields are set in file order, so defaults that
        depend on an earlier field (see SavUnion) see the passed value."""
        for element in self.save_set.elements:
            element.setDefault(self)
            for att in element.getSlotsUsed():
                if att in kwargs:
                    setattr(self, att, kwargs.pop(att))
        for att, val in kwargs.items():
            setattr(self, att, val)

    @classmethod
    def decode(cls, ins: SaveReader, *debug_strs):
        """Reads a new instance of this record from ins."""
        record = cls.__new__(cls)
        cls.save_set.load_sav(record, ins, *debug_strs, cls.__name__)
        return record

    def encode(self, out: SaveWriter):
        """Writes this record to out."""
        self.save_set.dump_sav(self, out)

    def field_names(self):
        return self.save_set.getSlotsUsed()

    def copy(self):
        """Returns a deep copy of this record."""
        return copy.deepcopy(self)

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return all(getattr(self, a) == getattr(other, a)
                   for a in self.field_names())

    def __ne__(self, other):
        eq = self.__eq__(other)
        return eq if eq is NotImplemented else not eq

    def __hash__(self):
        raise TypeError(f'unhashable type: {type(self)}')

    def __repr__(self):
        to_show = [f'{a}: {getattr(self, a, "<unset>")!r}'
                   for a in self.field_names() if not a.startswith('_')]
        return f'<{type(self).__name__}: {", ".join(to_show)}>'
