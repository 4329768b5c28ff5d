"""
Tests for the match log, narration templates, chat and items.
"""

import numpy as np

from arena_sim.agents.entity import Entity
from arena_sim.economy.inventory import ITEM_CATALOG, item_by_index, use_item
from arena_sim.social.chat import ChatLog
from arena_sim.viz.logger import MatchLogger, describe


class TestMatchLogger:
    """Kinds, verbosity filter, narrative."""

    def test_entries_keep_everything(self):
        logger = MatchLogger(verbosity=0)
        logger.log(MatchLogger.EAT, "A eats.", ["A"], day=2, value=30)
        entry = logger.entries[0]
        assert entry.day == 2
        assert entry.involved_ids == ["A"]
        assert entry.data == {"value": 30}

    def test_file_respects_verbosity(self, tmp_path):
        path = tmp_path / "logs" / "match.log"
        logger = MatchLogger(verbosity=1, log_file=str(path))
        logger.log(MatchLogger.DEATH, "B has fallen.", day=3)
        logger.log(MatchLogger.DAMAGE, "A strikes B.", day=3)
        logger.log(MatchLogger.REST, "A rests.", day=3)
        logger.flush_day(3)
        logger.close()

        lines = path.read_text(encoding="utf-8").splitlines()
        assert len(lines) == 2
        assert "B has fallen." in lines[0]
        assert all("rests" not in line for line in lines)

    def test_narrative(self):
        logger = MatchLogger()
        assert logger.get_narrative(1) == "Day 1: Nothing notable happened."
        logger.log(MatchLogger.SYSTEM, "Day 1 begins.", day=1)
        assert logger.get_narrative(1).startswith("=== Day 1 ===")
        assert logger.for_day(2) == []


class TestDescribe:
    def test_fills_template(self):
        text = describe("ATTACK_HIT", np.random.default_rng(0), source="A", target="B", val=12)
        assert "12" in text

    def test_unknown_key(self):
        assert describe("NOPE", np.random.default_rng(0)) == ""


class TestChatLog:
    def test_whispers_are_private(self):
        chat = ChatLog()
        chat.post("a", "A", "hi all", day=1)
        chat.post("a", "A", "psst", day=1, recipient_id="b", recipient_name="B")

        assert len(chat.visible_to("a")) == 2
        assert len(chat.visible_to("b")) == 2
        assert [m.text for m in chat.visible_to("c")] == ["hi all"]
        assert chat.messages[0].message_id != chat.messages[1].message_id


class TestInventory:
    def test_lookup_is_one_based(self):
        assert item_by_index(1) == "Bread"
        assert item_by_index(0) is None
        assert item_by_index(len(ITEM_CATALOG) + 1) is None

    def test_heal_items_clamp(self):
        entity = Entity("x", "X", is_autonomous=True)
        entity.hp = 195
        entity.inventory = ["Bandage"]
        assert use_item(entity, "Bandage")
        assert entity.hp == 200

    def test_painkillers_waive_costs(self):
        entity = Entity("x", "X", is_autonomous=True)
        entity.inventory = ["Painkillers"]
        assert use_item(entity, "Painkillers")
        assert entity.buffs.ignore_fatigue

    def test_not_held(self):
        entity = Entity("x", "X", is_autonomous=True)
        assert not use_item(entity, "Alcohol")
