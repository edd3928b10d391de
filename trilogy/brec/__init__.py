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
"""This package contains the binary codec save files are built from:
low level reading and writing (save_io), the elements (basic_elements,
advanced_elements) and the records made of them (record_structs)."""

from .advanced_elements import ACommonDecider, ADecider, AttrValDecider, \
    SavUnion, SinceVersionDecider
from .basic_elements import BoolVec, SaveElement, SavBool, SavBool8, \
    SavBoolVec, SavBytes, SavDict, SavEnum, SavFloat, SavGuid, SavInt32, \
    SavList, SavNull, SavNum, SavOptional, SavString, SavStruct, SavTail, \
    SavUInt8, SavUInt32, SavVersion
from .record_structs import RecordType, SaveRecord, SavSet
from .save_io import SaveReader, SaveWriter
