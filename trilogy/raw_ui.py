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
"""Generic access to any decoded save tree, for frontends that render and
edit fields without knowing the titles' layouts. Every field is described by
a Kind; fields are addressed by field paths, which look like this:

    player.level                 a field of a nested record
    squad[0].tag                 an item of a list
    plot.booleans[66]            a bit of a bitfield
    player_variables[SomeVar]    the value of a dict entry
    squad[*].tag                 every item of a list (eval_field/set_field)
    player.head_morph?.hair_mesh stops quietly if head_morph is absent

The codec in brec knows nothing about any of this."""
from __future__ import annotations

import math
import re
import uuid
from enum import Enum
from functools import singledispatch
from typing import NamedTuple

from .brec import SaveElement, SavBool, SavBoolVec, SavBytes, SavDict, \
    SavEnum, SavFloat, SavGuid, SavInt32, SavList, SavNull, SavOptional, \
    SaveRecord, SavString, SavStruct, SavTail, SavUInt8, SavUInt32, SavUnion
from .exception import ArgumentError

class Kind(Enum):
    """What a field holds, as far as a frontend is concerned."""
    STRING = 'string'
    BOOL = 'bool'
    U8 = 'u8'
    I32 = 'i32'
    U32 = 'u32'
    F32 = 'f32'
    ENUM = 'enum'
    GUID = 'guid'
    OPTION = 'option'
    LIST = 'list'
    BOOL_LIST = 'bool_list'
    DICT = 'dict'
    STRUCT = 'struct'
    BYTES = 'bytes'

    @property
    def is_primitive(self):
        return self not in _CONTAINER_KINDS

_CONTAINER_KINDS = {Kind.OPTION, Kind.LIST, Kind.BOOL_LIST, Kind.DICT,
                    Kind.STRUCT}

@singledispatch
def describe(element: SaveElement) -> Kind:
    """Returns the Kind of values element decodes to."""
    raise ArgumentError(f'{element!r} cannot be described')

for _elem_type, _kind in (
        (SavString, Kind.STRING), (SavBool, Kind.BOOL), (SavUInt8, Kind.U8),
        (SavInt32, Kind.I32), (SavUInt32, Kind.U32), (SavFloat, Kind.F32),
        (SavEnum, Kind.ENUM), (SavGuid, Kind.GUID),
        (SavOptional, Kind.OPTION), (SavList, Kind.LIST),
        (SavBoolVec, Kind.BOOL_LIST), (SavDict, Kind.DICT),
        (SavStruct, Kind.STRUCT), (SavBytes, Kind.BYTES),
        (SavTail, Kind.BYTES)):
    describe.register(_elem_type, lambda _e, _k=_kind: _k)
del _elem_type, _kind

# Fields ----------------------------------------------------------------------
class Field(NamedTuple):
    """One field of a record, as handed out to frontends."""
    name: str
    value: object
    kind: Kind
    element: SaveElement

def _active_element(record, element):
    """Resolves unions to the element that applies to record right now."""
    if isinstance(element, SavUnion):
        return element.current_element(record)
    return element

def _root_record(root) -> SaveRecord:
    # Accept SaveGame wrappers as well as bare trees
    return getattr(root, 'save_game', root)

def iter_fields(record: SaveRecord):
    """Yields a Field for every field of record, in file order. Fields the
    record's format version does not have are skipped."""
    for element in record.save_set.elements:
        element = _active_element(record, element)
        if isinstance(element, SavNull): continue
        for att in element.getSlotsUsed():
            yield Field(att, getattr(record, att), describe(element), element)

def _field_element(record, att) -> SaveElement:
    for element in record.save_set.elements:
        if att in element.getSlotsUsed():
            element = _active_element(record, element)
            if not isinstance(element, SavNull):
                return element
            break
    raise ArgumentError(f"{type(record).__name__} has no field '{att}'")

_BIT = SavBool()

def children(value, element: SaveElement):
    """Yields (key, child value, child element) for the items of a container
    value; keys are attribute names, indices or dict keys."""
    kind = describe(element)
    if kind is Kind.STRUCT:
        for fld in iter_fields(value):
            yield fld.name, fld.value, fld.element
    elif kind is Kind.OPTION:
        if value is not None:
            yield None, value, element.element
    elif kind is Kind.LIST:
        for i, item in enumerate(value):
            yield i, item, element.element
    elif kind is Kind.BOOL_LIST:
        for i, bit in enumerate(value):
            yield i, bit, _BIT
    elif kind is Kind.DICT:
        for k, v in value.items():
            yield k, v, element.value_element

def walk(root, prefix=''):
    """Yields (field path, Kind, value) for every primitive in the tree,
    depth first in file order."""
    record = _root_record(root)
    for fld in iter_fields(record):
        yield from _walk_value(f'{prefix}{fld.name}', fld.value, fld.element)

def _walk_value(path, value, element):
    kind = describe(element)
    if kind.is_primitive:
        yield path, kind, value
        return
    for key, child_val, child_elem in children(value, element):
        if key is None:
            child_path = f'{path}?'
        elif isinstance(key, str) and kind is Kind.STRUCT:
            child_path = f'{path}.{key}'
        else:
            child_path = f'{path}[{key}]'
        yield from _walk_value(child_path, child_val, child_elem)

# Field paths -----------------------------------------------------------------
_path_token = re.compile(r'(\.?)([A-Za-z_]\w*)|\[([^\]]*)\]|(\?)')

class _Slot(object):
    """A place in the tree a field path resolved to: holder[key] for
    containers, getattr(holder, key) for records."""
    __slots__ = ('holder', 'key', 'element')

    def __init__(self, holder, key, element):
        self.holder, self.key, self.element = holder, key, element

    def get(self):
        if isinstance(self.holder, SaveRecord):
            return getattr(self.holder, self.key)
        return self.holder[self.key]

    def set(self, value):
        if isinstance(self.holder, SaveRecord):
            setattr(self.holder, self.key, value)
        else:
            self.holder[self.key] = value

class FieldPath(object):
    """A parsed field path, see the module docstring for the syntax."""
    __slots__ = ('_path_str', '_steps')

    def __init__(self, path_str: str):
        self._path_str = path_str
        self._steps = self._parse(path_str)

    @staticmethod
    def _parse(path_str):
        steps = []
        pos = 0
        while pos < len(path_str):
            if not (ma := _path_token.match(path_str, pos)):
                raise ArgumentError(f"Invalid field path '{path_str}' at "
                                    f"position {pos}")
            dot, att, item, optional = ma.groups()
            if att is not None:
                if bool(dot) != bool(steps):
                    raise ArgumentError(f"Invalid field path '{path_str}': "
                                        f"fields must be separated by dots")
                steps.append(('attr', att))
            elif item is not None:
                if not steps:
                    raise ArgumentError(f"Invalid field path '{path_str}': "
                                        f"it must start with a field name")
                steps.append(('all', None) if item == '*' else
                             ('item', item))
            else:
                steps.append(('optional', None))
            pos = ma.end()
        if not steps:
            raise ArgumentError('Empty field path')
        if steps[-1][0] == 'optional':
            raise ArgumentError(f"Invalid field path '{path_str}': it may not "
                                f"end with '?'")
        return steps

    def resolve(self, root) -> list[_Slot]:
        """Returns the slots this path points to in root."""
        # The root record is the value of a pseudo slot
        slots = [_Slot([_root_record(root)], 0, None)]
        for step, arg in self._steps:
            slots = [s for slot in slots for s in self._step(slot, step, arg)]
        return slots

    def _step(self, slot, step, arg):
        value = slot.get()
        element = slot.element
        if element is not None and describe(element) is Kind.OPTION:
            if value is None:
                if step == 'optional': return []
                raise ArgumentError(f"'{self._path_str}': an optional field "
                                    f"on the way is absent")
            element = element.element
        if step == 'optional':
            return [_Slot([value], 0, element)]
        if step == 'attr':
            if not isinstance(value, SaveRecord):
                raise ArgumentError(f"'{self._path_str}': cannot get field "
                                    f"'{arg}' of a {type(value).__name__}")
            return [_Slot(value, arg, _field_element(value, arg))]
        kind = describe(element) if element is not None else None
        item_elem = _BIT if kind is Kind.BOOL_LIST else getattr(
            element, 'element', None) or getattr(element, 'value_element',
                                                 None)
        if kind in (Kind.LIST, Kind.BOOL_LIST):
            if step == 'all':
                return [_Slot(value, i, item_elem) for i in range(len(value))]
            try:
                index = int(arg)
            except ValueError:
                raise ArgumentError(f"'{self._path_str}': '{arg}' is not a "
                                    f"list index")
            if not 0 <= index < len(value):
                raise ArgumentError(f"'{self._path_str}': index {index} is "
                                    f"out of range (0-{len(value) - 1})")
            return [_Slot(value, index, item_elem)]
        if kind is Kind.DICT:
            if step == 'all':
                return [_Slot(value, k, item_elem) for k in value]
            dict_key = coerce(element.key_element, arg)
            if dict_key not in value:
                raise ArgumentError(f"'{self._path_str}': no entry "
                                    f"{dict_key!r}")
            return [_Slot(value, dict_key, item_elem)]
        raise ArgumentError(f"'{self._path_str}': cannot index into a "
                            f"{type(value).__name__}")

    def __repr__(self):
        return f'{type(self).__name__}({self._path_str!r})'

def _single_slot(root, path) -> _Slot:
    slots = FieldPath(path).resolve(root)
    if len(slots) != 1:
        raise ArgumentError(f"'{path}' resolves to {len(slots)} fields, "
                            f"expected exactly one")
    return slots[0]

def eval_field(root, path) -> list:
    """Returns the values of all fields path resolves to."""
    return [s.get() for s in FieldPath(path).resolve(root)]

def get_field(root, path):
    return _single_slot(root, path).get()

def describe_field(root, path) -> Kind:
    return describe(_single_slot(root, path).element)

def set_field(root, path, value):
    """Sets every field path resolves to, converting value to the field's
    kind first (see coerce). Returns the number of fields set."""
    slots = FieldPath(path).resolve(root)
    for slot in slots:
        slot.set(coerce(slot.element, value))
    return len(slots)

# Value conversion ------------------------------------------------------------
_INT_RANGES = {Kind.I32: (-2 ** 31, 2 ** 31 - 1), Kind.U32: (0, 2 ** 32 - 1)}
_F32_MAX = 3.4028235e38
_TRUE_STRS = {'true', '1', 'yes', 'on'}
_FALSE_STRS = {'false', '0', 'no', 'off'}

def coerce(element: SaveElement, value):
    """Converts value (possibly text typed in by a user) to what element
    stores. Raises an ArgumentError if that is impossible. Numbers out of
    range for a u8 are clamped to 0-255."""
    kind = describe(element)
    try:
        if kind is Kind.STRING:
            return f'{value}'
        if kind is Kind.BOOL:
            if isinstance(value, str):
                if value.lower() in _TRUE_STRS: return True
                if value.lower() in _FALSE_STRS: return False
                raise ValueError(value)
            return bool(value)
        if kind is Kind.U8:
            return min(max(int(value), 0), 255)
        if kind in _INT_RANGES:
            int_val = int(value)
            lo, hi = _INT_RANGES[kind]
            if not lo <= int_val <= hi:
                raise ArgumentError(f'{int_val} is out of range for a '
                                    f'{kind.value} ({lo} to {hi})')
            return int_val
        if kind is Kind.F32:
            float_val = float(value)
            if math.isfinite(float_val) and abs(float_val) > _F32_MAX:
                raise ArgumentError(f'{float_val} is out of range for a '
                                    f'{kind.value}')
            return float_val
        if kind is Kind.ENUM:
            return _coerce_enum(element.enum_type, value)
        if kind is Kind.GUID:
            return value if isinstance(value, uuid.UUID) else uuid.UUID(
                f'{value}')
        if kind is Kind.OPTION:
            return None if value is None else coerce(element.element, value)
    except (TypeError, ValueError) as e:
        raise ArgumentError(f'{value!r} is not a valid {kind.value}') from e
    expected = {Kind.LIST: list, Kind.BOOL_LIST: list, Kind.DICT: dict,
                Kind.BYTES: bytes}.get(kind) or element.record_type
    if not isinstance(value, expected):
        raise ArgumentError(f'Expected a {expected.__name__} for a '
                            f'{kind.value} field, got {value!r}')
    return value

def _coerce_enum(enum_type, value):
    if isinstance(value, enum_type):
        return value
    if isinstance(value, str) and not value.lstrip('-').isdigit():
        wanted = value.lower()
        for member in enum_type:
            if member.name.lower() == wanted:
                return member
        raise ValueError(value)
    return enum_type(int(value))

# Editing containers ----------------------------------------------------------
def add_item(root, path, key=None):
    """Appends a default item to the list path points to, or adds an entry
    with a default value to the dict. Dict keys default to the key's default
    value, except for integer keys which default to -1. Returns the index or
    key of the new item."""
    slot = _single_slot(root, path)
    container = slot.get()
    kind = describe(slot.element)
    if kind is Kind.LIST:
        container.append(slot.element.element.getDefault())
        return len(container) - 1
    if kind is Kind.BOOL_LIST:
        # Bitfields grow a whole word at a time
        new_index = len(container)
        container.grow_to(new_index + 1)
        return new_index
    if kind is Kind.DICT:
        key_elem = slot.element.key_element
        if key is None:
            key = -1 if isinstance(key_elem, SavInt32) else \
                key_elem.getDefault()
        key = coerce(key_elem, key)
        if key in container:
            raise ArgumentError(f"'{path}' already has an entry {key!r}")
        container[key] = slot.element.value_element.getDefault()
        return key
    raise ArgumentError(f"'{path}' is a {kind.value}, not a list or dict")

def remove_item(root, path, key):
    """Removes the item at index key from the list path points to, or the
    entry key from the dict. Bits of a bitfield are addressed by position,
    so they can only be cleared, never removed."""
    slot = _single_slot(root, path)
    container = slot.get()
    kind = describe(slot.element)
    if kind is Kind.BOOL_LIST:
        raise ArgumentError(f"'{path}' is a bitfield, its bits can be set to "
                            f"false but not removed")
    if kind is Kind.LIST:
        index = coerce(SavInt32(), key)
        if not 0 <= index < len(container):
            raise ArgumentError(f"'{path}': index {index} is out of range")
        del container[index]
    elif kind is Kind.DICT:
        dict_key = coerce(slot.element.key_element, key)
        try:
            del container[dict_key]
        except KeyError:
            raise ArgumentError(f"'{path}' has no entry {dict_key!r}")
    else:
        raise ArgumentError(f"'{path}' is a {kind.value}, not a list or "
                            f"dict")

def _option_slot(root, path):
    slot = _single_slot(root, path)
    if describe(slot.element) is not Kind.OPTION:
        raise ArgumentError(f"'{path}' is not an optional field")
    return slot

def remove_option(root, path):
    """Makes the optional field path points to absent."""
    _option_slot(root, path).set(None)

def fill_option(root, path):
    """Gives the optional field path points to a default value, unless it
    already has one. Returns the value."""
    slot = _option_slot(root, path)
    if (value := slot.get()) is None:
        slot.set(value := slot.element.element.getDefault())
    return value
