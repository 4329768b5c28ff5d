"""Item definitions and what using one does."""

from __future__ import annotations

from typing import Optional

from arena_sim.agents import needs
from arena_sim.agents.entity import Entity
from arena_sim.core.config import ITEMS_LIST, SHARPENING_STONE_BONUS


# =============================================================================
# Item catalog - all items and their effects
# =============================================================================

ITEM_CATALOG: dict[str, dict] = {
    "Bread": {"hunger": 10, "description": "A simple meal. Restores +10 Hunger."},
    "Canned Food": {"hunger": 15, "description": "Preserved nutrients. Restores +15 Hunger."},
    "Sharpening Stone": {
        "damage_bonus": SHARPENING_STONE_BONUS,
        "description": "Adds +15 Damage to your next attack. Consumed on use.",
    },
    "Bandage": {"hp": 10, "description": "Basic medical supply. Restores +10 HP."},
    "Alcohol": {"hp": 7, "description": "Strong disinfectant. Restores +7 HP."},
    "Painkillers": {"ignore_fatigue": True, "description": "Nulls the cost of the next action."},
}


def item_by_index(index: int) -> Optional[str]:
    """1-based lookup, as carried in RUN events."""
    if 1 <= index <= len(ITEMS_LIST):
        return ITEMS_LIST[index - 1]
    return None


def use_item(entity: Entity, item: str) -> bool:
    """Consume one ``item`` from the inventory and apply it.

    Returns False when the entity does not hold the item.
    """
    if entity.is_dead or item not in entity.inventory:
        return False
    effect = ITEM_CATALOG.get(item)
    if effect is None:
        return False

    entity.inventory.remove(item)
    needs.restore(entity, hunger=effect.get("hunger", 0), hp=effect.get("hp", 0))
    if "damage_bonus" in effect:
        entity.buffs.damage_bonus = effect["damage_bonus"]
    if effect.get("ignore_fatigue"):
        entity.buffs.ignore_fatigue = True
    return True
