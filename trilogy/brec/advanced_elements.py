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
"""Houses more complex building blocks for creating save record definitions.
The split is somewhat arbitrary, but generally elements that pick what to
read based on other fields go here."""
from __future__ import annotations

from .basic_elements import SaveElement, SavNull

#------------------------------------------------------------------------------
# Unions and deciders
class ADecider(object):
    """Picks a key for SavUnion's element mapping from the record being
    decoded or encoded."""

    def decide_load(self, record, ins):
        """Picks the key while decoding. Every field that comes before the
        union in the record has already been set on record, and ins is
        positioned at the union's first byte."""
        raise NotImplementedError

    def decide_dump(self, record):
        """Picks the key while encoding, or when filling in defaults, from
        the fields of record alone."""
        raise NotImplementedError

class ACommonDecider(ADecider):
    """A decider that never needs to look at the input, so decoding and
    encoding share one implementation, _decide_common."""
    def decide_load(self, record, ins):
        return self._decide_common(record)

    def decide_dump(self, record):
        return self._decide_common(record)

    def _decide_common(self, record):
        raise NotImplementedError

class AttrValDecider(ACommonDecider):
    """Keys on the value of one field of the record, passed through
    transformer if one is given."""
    def __init__(self, target_attr, transformer=None):
        self.target_attr = target_attr
        self.transformer = transformer

    def _decide_common(self, record):
        field_val = getattr(record, self.target_attr)
        return field_val if self.transformer is None else self.transformer(
            field_val)

class SinceVersionDecider(AttrValDecider):
    """Decider that returns True if the record's format version is at least
    target_version."""
    def __init__(self, target_version, version_attr='version'):
        super().__init__(version_attr,
                         transformer=lambda ver: ver >= target_version)

#------------------------------------------------------------------------------
class SavUnion(SaveElement):
    """Resolves to one of several save elements based on an ADecider. The
    decider's return value is looked up in element_mapping to pick the element
    that is used for loading and dumping. All elements have to share the
    same attribute. The typical use is gating a field on the format version:

        SavUnion({
            True: SavString('display_name'),
            False: SavNull('display_name'),
        }, SinceVersionDecider(30)),
    """
    __slots__ = ('element_mapping', 'decider')

    def __init__(self, element_mapping: dict, decider: ADecider):
        attrs = {e.attr for e in element_mapping.values()}
        if len(attrs) != 1:
            raise SyntaxError(f'SavUnion elements must share a single '
                              f'attribute (got {sorted(attrs)})')
        super().__init__(attrs.pop())
        self.element_mapping = element_mapping
        self.decider = decider

    @property
    def min_size(self):
        return min(e.min_size for e in self.element_mapping.values())

    def _get_element(self, decider_ret):
        try:
            return self.element_mapping[decider_ret]
        except KeyError:
            raise ValueError(f'Decider returned {decider_ret!r}, which is not '
                             f'a valid key for {self!r}')

    def current_element(self, record) -> SaveElement:
        """Returns the element that applies to record as it is now."""
        return self._get_element(self.decider.decide_dump(record))

    def getDefault(self):
        # Without a record we can only offer the 'absent' value if there is
        # one
        for element in self.element_mapping.values():
            if isinstance(element, SavNull):
                return None
        return next(iter(self.element_mapping.values())).getDefault()

    def setDefault(self, record):
        self.current_element(record).setDefault(record)

    def load_sav(self, record, ins, *debug_strs):
        self._get_element(self.decider.decide_load(record, ins)).load_sav(
            record, ins, *debug_strs)

    def dump_sav(self, record, out):
        self.current_element(record).dump_sav(record, out)

    def __repr__(self):
        return f'{type(self).__name__}({self.attr!r}, ' \
               f'{list(self.element_mapping)})'
