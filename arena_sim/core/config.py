"""All tunable constants for the arena simulation.

Every magic number in the codebase must reference this file.
"""

# =============================================================================
# ROSTER
# =============================================================================
MAX_PLAYERS: int = 24
START_HP: int = 200
MAX_HP: int = 200
START_HUNGER: int = 100
START_FATIGUE: int = 100
RESOURCE_MAX: int = 100

NAMES_LIST: list[str] = [
    "Clove", "Thresh", "Glimmer", "Marvel", "Cato", "Foxface", "Rue", "Gloss",
    "Cashmere", "Brutus", "Enobaria", "Beetee", "Wiress", "Finnick", "Mags",
    "Johanna", "Chaff", "Seeder", "Peeta", "Gale", "Haymitch", "Effie", "Cinna",
    "Caesar", "Snow", "Coin", "Prim", "Boggs", "Cressida", "Messalla", "Castor",
    "Pollux", "Annie", "Plutarch", "Lydia", "Marcus", "Valerius", "Octavia",
    "Flavius", "Venia", "Atala", "Seneca", "Claudius", "Tigris", "Portia",
    "Aurelius", "Gaius", "Lucius", "Felix",
]

# =============================================================================
# UPKEEP - applied once per night, after playback drains
# =============================================================================
REGEN_HUNGER: int = 5
REGEN_FATIGUE: int = 5

RUN_COOLDOWN: int = 1        # days RUN stays locked after use
EAT_COOLDOWN: int = 2        # assigned at impact; decays once before next day
REST_COOLDOWN: int = 2
PISTOL_COOLDOWN: int = 0

# =============================================================================
# ACTION COSTS (hunger, fatigue)
# =============================================================================
COST_ATTACK_HUNGER: int = 30
COST_ATTACK_FATIGUE: int = 30
PISTOL_COST_HUNGER: int = 30
PISTOL_COST_FATIGUE: int = 30
COST_DEFEND_HUNGER: int = 15
COST_DEFEND_FATIGUE: int = 10
COST_RUN_HUNGER: int = 20
COST_RUN_FATIGUE: int = 30
COST_HEAL_FATIGUE: int = 20

# =============================================================================
# EFFECTS
# =============================================================================
DAMAGE_MIN: int = 30
DAMAGE_MAX: int = 40
PISTOL_DAMAGE_MIN: int = 80
PISTOL_DAMAGE_MAX: int = 100

EAT_REGEN: int = 30
EAT_HP_REGEN: int = 5
REST_REGEN: int = 30
REST_HP_REGEN: int = 5
HEAL_AMOUNT: int = 25

RUN_SUCCESS_CHANCE: float = 0.8
RUN_FAIL_DAMAGE: int = 10
LOOT_CHANCE: float = 0.5     # coin flip for an item after a successful RUN

# DEFEND blocks a fraction of the hit, scaled by the defender's fatigue
DEFEND_MITIGATION_FLOOR: float = 0.5
DEFEND_MITIGATION_CEILING: float = 0.8

# =============================================================================
# MATCH PHASES
# =============================================================================
CRITICAL_PLAYER_COUNT: int = 5
CRITICAL_DAMAGE_MULTIPLIER: float = 1.2
FINAL_DUEL_COUNT: int = 2
LOCKDOWN_DAY: int = 50        # EAT/REST disabled from this day on

# (first day, evasion chance, zone damage) - last matching row wins
PHASE_TABLE: list[tuple[int, float, int]] = [
    (1, RUN_SUCCESS_CHANCE, 0),
    (21, 0.6, 5),
    (30, 0.4, 10),
    (45, 0.4, 20),
]

# (last day inclusive, seconds)
DAY_DURATION_TABLE: list[tuple[int, int]] = [
    (10, 35),
    (19, 30),
    (29, 20),
]
DAY_DURATION_LATE: int = 10

# =============================================================================
# RANGED WEAPON
# =============================================================================
PISTOL_START_DAY: int = 7
PISTOL_END_DAY: int = 15
PISTOL_CHANCE: float = 0.3    # per day inside the window while unclaimed

# =============================================================================
# HAZARDS
# =============================================================================
VOLCANO_DAMAGE: int = 45
VOLCANO_MIN_DAY: int = 10
VOLCANO_MAX_DAY: int = 15

GAS_DAMAGE: int = 35
GAS_MIN_DAY: int = 4
GAS_MAX_DAY: int = 6

MONSTER_START_DAY: int = 30
MONSTER_START_JITTER: int = 2       # first hunt lands on start + U{0..jitter}
MONSTER_DAMAGE: int = 45
MONSTER_INTERVAL_MIN: int = 1
MONSTER_INTERVAL_MAX: int = 3

ZONE_SHRINK_DAYS: tuple[int, ...] = (20, 30, 45)

HAZARD_WARNING_LEAD_DAYS: int = 1

# =============================================================================
# TIMING (milliseconds of simulated time)
# =============================================================================
COUNTDOWN_TICK_MS: int = 1000
PLAYBACK_PULL_DELAY_MS: int = 100
NIGHT_SETTLE_MS: int = 1000

# (total duration, impact instant)
EVENT_TIMING_MS: dict[str, tuple[int, int]] = {
    "ATTACK": (1400, 700),
    "SHOOT": (1000, 400),
}
DEFAULT_EVENT_TIMING_MS: tuple[int, int] = (900, 250)

HAZARD_DELAY_MS: dict[str, int] = {
    "ERUPTION": 10000,
    "GAS": 8000,
    "MONSTER": 8000,
}

# =============================================================================
# ITEMS
# =============================================================================
ITEMS_LIST: list[str] = [
    "Bread", "Canned Food", "Sharpening Stone", "Bandage", "Alcohol", "Painkillers",
]
SHARPENING_STONE_BONUS: int = 15

# =============================================================================
# DASHBOARD
# =============================================================================
REPORT_DPI: int = 150
