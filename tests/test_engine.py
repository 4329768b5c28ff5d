"""
Tests for the day/cycle controller and the match boundary.

Tests:
- Countdown, night, upkeep and the next day
- Submission idempotence and rejection feedback
- Game over with and without a winner
- Teardown cancels every timer
- Items, chat, surrender, autopilot, warnings, weapon drop
- Vitals invariants across a whole match
"""

import dataclasses

import pytest

from arena_sim.agents import needs
from arena_sim.agents.entity import Status
from arena_sim.combat.actions import ActionKind, RejectReason
from arena_sim.core.clock import Phase
from arena_sim.core.config import MAX_HP, MAX_PLAYERS, RESOURCE_MAX
from arena_sim.simulation.engine import MatchEngine
from arena_sim.simulation.events import HazardKind
from arena_sim.viz.logger import MatchLogger


def _a_bot(engine):
    return next(e for e in engine.state.entities if e.is_autonomous)


class TestLifecycle:
    """LOBBY -> DAY <-> NIGHT -> GAME_OVER."""

    def test_start(self, engine):
        state = engine.state
        assert engine.phase == Phase.DAY
        assert state.day == 1
        assert state.countdown == 35
        assert len(state.entities) == MAX_PLAYERS
        assert sum(1 for e in state.entities if not e.is_autonomous) == 1

    def test_countdown_ticks(self, engine):
        engine.scheduler.advance(1000)
        assert engine.state.countdown == 34

    def test_countdown_expiry_starts_night(self, engine):
        engine.scheduler.advance(35_000)
        assert engine.phase == Phase.NIGHT
        assert engine.state.countdown == 0

    def test_full_cycle(self, quiet_engine):
        quiet_engine.submit_action("Player", ActionKind.DEFEND)
        assert quiet_engine.run_day()

        state = quiet_engine.state
        assert state.day == 2
        assert state.phase == Phase.DAY
        assert state.pending == {}
        assert state.countdown == 35
        assert len(quiet_engine.metrics.snapshots) == 1

    def test_end_day_only_from_day(self, engine):
        engine.end_day()
        with pytest.raises(RuntimeError):
            engine.end_day()

    def test_no_match_yet(self):
        with pytest.raises(RuntimeError):
            MatchEngine(seed=1).snapshot()


class TestSubmission:
    """Validator gate and the pending slot."""

    def test_resubmission_is_one_action(self, quiet_engine):
        assert quiet_engine.submit_action("Player", ActionKind.DEFEND)
        assert quiet_engine.submit_action("Player", ActionKind.DEFEND)
        assert len(quiet_engine.state.pending) == 1

        quiet_engine.end_day()
        player = quiet_engine.state.get("Player")
        # one DEFEND paid, not two
        assert (player.hunger, player.fatigue) == (85, 90)

    def test_rejection_keeps_previous_choice(self, quiet_engine):
        state = quiet_engine.state
        player = state.get("Player")
        player.hunger, player.fatigue = 25, 50
        target = _a_bot(quiet_engine).id

        verdict = quiet_engine.submit_action("Player", ActionKind.ATTACK, target)
        assert verdict.reason == RejectReason.INSUFFICIENT_HUNGER
        assert state.pending_for("Player").is_none
        assert state.feedback == RejectReason.INSUFFICIENT_HUNGER.value

        assert quiet_engine.submit_action("Player", ActionKind.DEFEND)
        assert state.feedback is None
        assert not quiet_engine.submit_action("Player", "ATTACK", target)
        assert state.pending_for("Player").kind == ActionKind.DEFEND

    def test_night_rejects(self, engine):
        engine.end_day()
        verdict = engine.submit_action("Player", ActionKind.DEFEND)
        assert verdict.reason == RejectReason.WRONG_PHASE

    def test_target_on_untargeted_action(self, engine):
        state = engine.state
        assert engine.submit_action("Player", ActionKind.DEFEND)

        verdict = engine.submit_action("Player", ActionKind.EAT, _a_bot(engine).id)
        assert verdict.reason == RejectReason.INVALID_TARGET
        assert state.pending_for("Player").kind == ActionKind.DEFEND
        assert state.feedback == RejectReason.INVALID_TARGET.value

    def test_unknown_action_kind(self, engine):
        verdict = engine.submit_action("Player", "FLY")
        assert verdict.reason == RejectReason.UNKNOWN_ACTION
        assert engine.state.pending_for("Player").is_none
        assert engine.state.feedback == RejectReason.UNKNOWN_ACTION.value

    def test_same_seed_same_event_ids(self):
        """Event ids replay with the seed, even in one process."""
        nights = []
        for _ in range(2):
            match = MatchEngine(seed=3)
            match.start(["Player"])
            plan = match.end_day()
            nights.append([(e.event_id, e.kind, e.source_id) for e in plan.events])

        assert nights[0] == nights[1]
        assert nights[0][0][0] == "ev-000001"
        assert len({event_id for event_id, _, _ in nights[0]}) == len(nights[0])


class TestGameOver:
    """Winner is the last one standing, or nobody."""

    def test_single_survivor_wins(self, quiet_engine):
        survivor_id = _a_bot(quiet_engine).id
        for entity in quiet_engine.state.entities:
            if entity.id != survivor_id:
                needs.kill(entity)

        quiet_engine.run_night()

        assert quiet_engine.phase == Phase.GAME_OVER
        assert quiet_engine.state.winner_id == survivor_id
        assert quiet_engine.scheduler.pending == 0

    def test_nobody_survives(self, quiet_engine):
        for entity in quiet_engine.state.entities:
            needs.kill(entity)

        quiet_engine.run_night()

        assert quiet_engine.is_over
        assert quiet_engine.state.winner_id is None


class TestTeardown:
    """Leaving cancels everything the match scheduled."""

    def test_leave_during_day(self, engine):
        engine.leave()
        assert engine.phase == Phase.LOBBY
        assert engine.scheduler.pending == 0

        engine.scheduler.advance(100_000)
        assert engine.phase == Phase.LOBBY
        assert engine.state.day == 1

    def test_leave_during_night(self, engine):
        engine.end_day()
        engine.scheduler.advance(150)
        engine.leave()

        assert engine.state.current_event is None
        assert engine.state.event_queue == []
        assert engine.scheduler.pending == 0

    def test_restart_after_leave(self, engine):
        engine.leave()
        engine.start(["Someone"])
        assert engine.phase == Phase.DAY
        assert engine.state.human_id == "Someone"


class TestBoundary:
    """Items, chat, surrender, connection."""

    def test_use_item(self, engine):
        player = engine.state.get("Player")
        player.hunger = 50
        player.inventory = ["Bread", "Sharpening Stone"]

        assert engine.use_item("Player", "Bread")
        assert engine.use_item("Player", "Sharpening Stone")
        assert player.hunger == 60
        assert player.buffs.damage_bonus == 15
        assert player.inventory == []

        assert not engine.use_item("Player", "Bread")
        assert engine.state.feedback == "cannot use Bread"

    def test_item_recovers_stun(self, engine):
        player = engine.state.get("Player")
        player.hunger = 0
        player.status = Status.STUNNED
        player.inventory = ["Canned Food"]

        assert engine.use_item("Player", "Canned Food")
        assert player.status == Status.ALIVE

    def test_chat(self, engine):
        bot = _a_bot(engine)
        engine.send_chat("Player", "hello arena")
        whisper = engine.send_chat("Player", "truce?", recipient_id=bot.id)

        assert whisper.is_whisper
        assert whisper.recipient_name == bot.name
        other = engine.state.entities[-1].id
        assert [m.text for m in engine.state.chat.visible_to(other)] == ["hello arena"]
        assert len(engine.state.chat.visible_to(bot.id)) == 2
        assert engine.state.logger.entries[-1].kind == MatchLogger.CHAT

    def test_chat_unknown_sender(self, engine):
        with pytest.raises(ValueError):
            engine.send_chat("Ghost", "boo")

    def test_surrender(self, engine):
        assert engine.surrender("Player")
        assert engine.state.get("Player").status == Status.DEAD
        assert engine.submit_action("Player", ActionKind.DEFEND).reason == RejectReason.DEAD
        assert not engine.surrender("Player")

    def test_autopilot_chooses_for_human(self):
        engine = MatchEngine(seed=3, human_autopilot=True)
        engine.start(["Player"])
        plan = engine.end_day()
        assert plan.choices["Player"].kind != ActionKind.NONE

    def test_disconnected_human_defends(self, engine):
        engine.set_connected("Player", False)
        plan = engine.end_day()
        assert plan.choices["Player"].kind == ActionKind.DEFEND

    def test_snapshot_is_read_only(self, engine):
        snap = engine.snapshot()
        view = snap.entity("Player")
        engine.state.get("Player").hp = 1

        assert view.hp == MAX_HP
        with pytest.raises(dataclasses.FrozenInstanceError):
            view.hp = 5
        assert "Player" in snap.alive_ids


class TestUpkeep:
    """What happens between drain and the next day."""

    def test_regeneration_and_cooldowns(self, quiet_engine):
        player = quiet_engine.state.get("Player")
        player.hunger = 50
        player.cooldowns.eat = 2
        player.buffs.damage_bonus = 15
        quiet_engine.run_night()

        player = quiet_engine.state.get("Player")
        assert player.hunger == 55
        assert player.cooldowns.eat == 1
        assert player.buffs.damage_bonus == 0

    def test_warning_before_gas_and_hazard_night(self, engine):
        gas_day = engine.state.schedule.gas_day
        while engine.state.day < gas_day - 1:
            engine.run_day()

        warning = engine.state.warning
        assert warning.kind == HazardKind.GAS
        assert any(e.kind == MatchLogger.WARNING for e in engine.logger.for_day(gas_day - 1))

        while engine.state.day <= gas_day:
            engine.run_day()
        hazard_night = next(s for s in engine.metrics.snapshots if s.day == gas_day)
        assert hazard_night.hazard == "GAS"

    def test_weapon_drop(self, engine):
        assert engine._maybe_drop_weapon(6) is None

        lucky = None
        for _ in range(200):
            lucky = engine._maybe_drop_weapon(7)
            if lucky is not None:
                break
        assert lucky is not None
        assert sum(1 for e in engine.state.entities if e.has_weapon) == 1
        assert engine._maybe_drop_weapon(8) is None

    def test_monster_skipped_by_zone_is_rescheduled(self, quiet_engine):
        schedule = quiet_engine.state.schedule
        schedule.next_monster_day = 1
        schedule.zone_shrink_days = (1,)

        quiet_engine.run_night()

        assert 2 <= schedule.next_monster_day <= 4


class TestWholeMatch:
    """Invariants hold at every observed state."""

    def test_invariants_until_game_over(self):
        engine = MatchEngine(seed=11, human_autopilot=True)
        engine.start(["Player"])
        dead: set[str] = set()

        while not engine.is_over and engine.day <= 500:
            assert engine.run_day()
            for entity in engine.state.entities:
                assert 0 <= entity.hp <= MAX_HP
                assert 0 <= entity.hunger <= RESOURCE_MAX
                assert 0 <= entity.fatigue <= RESOURCE_MAX
                if entity.hp == 0:
                    assert entity.status == Status.DEAD
                if entity.id in dead:
                    assert entity.status == Status.DEAD
                if entity.is_dead:
                    dead.add(entity.id)

        assert engine.is_over
        living = engine.state.living()
        assert len(living) <= 1
        assert engine.state.winner_id == (living[0].id if living else None)
