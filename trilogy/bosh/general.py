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
"""Edits that touch more than one field. Changing Shepard's gender, origin or
notoriety in ME2 also has to update the plot flags the game checks for them,
both in the ME2 plot table and in the imported ME1 one."""
from __future__ import annotations

from .mass_effect_2 import Me2SaveGame
from .plot import PlotKind
from .shared import Notoriety, Origin, Power
from ..bolt import CIstr
from ..exception import ArgumentError

ME2_CLASSES = (
    'SFXGame.SFXPawn_PlayerAdept',
    'SFXGame.SFXPawn_PlayerEngineer',
    'SFXGame.SFXPawn_PlayerInfiltrator',
    'SFXGame.SFXPawn_PlayerSentinel',
    'SFXGame.SFXPawn_PlayerSoldier',
    'SFXGame.SFXPawn_PlayerVanguard',
)

# (power class name, display name)
ME2_BONUS_POWERS = (
    ('SFXGameContent_Powers.SFXPower_Crush_Player', 'Slam'),
    ('SFXGameContent_Powers.SFXPower_Barrier_Player', 'Barrier'),
    ('SFXGameContent_Powers.SFXPower_WarpAmmo_Player', 'Warp Ammo'),
    ('SFXGameContent_Powers.SFXPower_Fortification_Player', 'Fortification'),
    ('SFXGameContent_Powers.SFXPower_ArmorPiercingAmmo_Player',
     'Armor Piercing Ammo'),
    ('SFXGameContent_Powers.SFXPower_NeuralShock_Player', 'Neural Shock'),
    ('SFXGameContent_Powers.SFXPower_ShieldJack_Player', 'Energy Drain'),
    ('SFXGameContent_Powers.SFXPower_Reave_Player', 'Reave'),
    ('SFXGameContent_Powers.SFXPower_Dominate_Player', 'Dominate'),
    ('SFXGameContent_Powers.SFXPower_AntiOrganicAmmo_Player',
     'Shredder Ammo'),
    ('SFXGameContent_Powers.SFXPower_GethShieldBoost_Player',
     'Geth Shield Boost'),
    ('SFXGameContentDLC_HEN_VT.SFXPower_ZaeedUnique_Player',
     'Inferno Grenade'),
    ('SFXGameContentKasumi.SFXPower_KasumiUnique_Player',
     'Flashbang Grenade'),
    ('SFXGameContentLiara.SFXPower_StasisNew', 'Stasis'),
)

# Plot ids
_ME2_IS_FEMALE = 66
_ME1_IS_FEMALE = 4639
_ORIGIN_FLAGS = {
    Origin.Spacer: 1533,
    Origin.Earthborn: 1534,
    Origin.Colonist: 1535,
}
_NOTORIETY_FLAGS = {
    Notoriety.Survivor: 1537,
    Notoriety.Warhero: 1538,
    Notoriety.Ruthless: 1539,
}
_ME1_ORIGIN = 1
_ME1_NOTORIETY = 2
_PARAGON = 2
_RENEGADE = 3

def _me2_tree(save) -> Me2SaveGame:
    """Accepts a SaveGame or a bare save tree, returns the ME2 tree."""
    save_game = getattr(save, 'save_game', save)
    if not isinstance(save_game, Me2SaveGame):
        raise ArgumentError(f'Expected a Mass Effect 2 save, got '
                            f'{type(save_game).__name__}')
    return save_game

def _set_exclusive(plot_table, flag_ids, chosen):
    """Sets the flag of chosen and clears the others. Flags the table does not
    have are skipped, as are all of them if chosen has no flag."""
    if chosen not in flag_ids: return
    for member, plot_id in flag_ids.items():
        plot_table.set(PlotKind.BOOLEANS, plot_id, member is chosen)

def set_gender(save, is_female: bool):
    me2 = _me2_tree(save)
    me2.player.is_female = is_female
    me2.plot.set(PlotKind.BOOLEANS, _ME2_IS_FEMALE, is_female)
    me2.me1_plot.set(PlotKind.BOOLEANS, _ME1_IS_FEMALE, is_female)

def set_origin(save, origin):
    me2 = _me2_tree(save)
    origin = Origin(origin)
    me2.player.origin = origin
    _set_exclusive(me2.plot, _ORIGIN_FLAGS, origin)
    me2.me1_plot.set(PlotKind.INTEGERS, _ME1_ORIGIN, int(origin))

def set_notoriety(save, notoriety):
    me2 = _me2_tree(save)
    notoriety = Notoriety(notoriety)
    me2.player.notoriety = notoriety
    _set_exclusive(me2.plot, _NOTORIETY_FLAGS, notoriety)
    me2.me1_plot.set(PlotKind.INTEGERS, _ME1_NOTORIETY, int(notoriety))

def player_class(save):
    """Returns the canonical class name of the player, or None if the save
    holds a class we don't know."""
    class_name = CIstr(_me2_tree(save).player.class_name)
    return next((c for c in ME2_CLASSES if class_name == c), None)

def set_player_class(save, class_name):
    """Sets the player class; class_name is matched case insensitively."""
    wanted = CIstr(class_name)
    for known_class in ME2_CLASSES:
        if wanted == known_class:
            _me2_tree(save).player.class_name = known_class
            return
    raise ArgumentError(f"Unknown class '{class_name}'")

def morality(save):
    """Returns (paragon, renegade), None where the plot lacks the flag."""
    plot_table = _me2_tree(save).plot
    return (plot_table.get(PlotKind.INTEGERS, _PARAGON),
            plot_table.get(PlotKind.INTEGERS, _RENEGADE))

def set_morality(save, paragon=None, renegade=None):
    plot_table = _me2_tree(save).plot
    if paragon is not None:
        plot_table.set(PlotKind.INTEGERS, _PARAGON, paragon)
    if renegade is not None:
        plot_table.set(PlotKind.INTEGERS, _RENEGADE, renegade)

#------------------------------------------------------------------------------
def has_bonus_power(powers: list[Power], power_class_name):
    power_class_name = CIstr(power_class_name)
    return any(power_class_name == p.power_class_name for p in powers)

def toggle_bonus_power(powers: list[Power], power_class_name) -> bool:
    """Removes the power with the given class name from powers if there is
    one, else adds a new one. Returns True if the power was added."""
    wanted = CIstr(power_class_name)
    for p_dex, power in enumerate(powers):
        if wanted == power.power_class_name:
            del powers[p_dex]
            return False
    powers.append(Power(power_class_name=power_class_name))
    return True
