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
"""Trilogy Save Editor: reads, edits, compares and writes back the save games
of Mass Effect 1, 2 and 3 and their Legendary Edition releases."""
