import os

# --- GLOBAL CONFIGURATION ---
SCREEN_WIDTH = 480
SCREEN_HEIGHT = 320
PET_SIZE = (100, 100)
FPS = int(os.getenv("DESKPET_FPS", "30"))
SAVE_FILE = os.getenv("DESKPET_SAVE_FILE", "pet_save.json")
LOG_LEVEL = os.getenv("DESKPET_LOG_LEVEL", "INFO")
# Empty string = unseeded. Set DESKPET_SEED for reproducible sessions.
RNG_SEED = os.getenv("DESKPET_SEED", "")

# --- STATUS ---
STAT_NAMES = ('mood', 'cleanliness', 'hunger', 'energy')
CAP_NAMES = {
    'mood': 'max_mood',
    'cleanliness': 'max_cleanliness',
    'hunger': 'max_hunger',
    'energy': 'max_energy',
}
BASE_CAP = 100.0
CAP_GAIN_PER_LEVEL = 5
EXP_PER_TICK = 1

DEFAULT_STATUS = {
    'mood': 80.0,
    'cleanliness': 80.0,
    'hunger': 20.0,  # 0 = full, max_hunger = starving
    'energy': 80.0,
    'exp': 0,
    'level': 1,
}

# Interactions that a level-up makes available
LEVEL_UNLOCKS = {3: ['train'], 5: ['learn'], 8: ['special']}

# --- DECAY (points per tick interval) ---
TICK_INTERVAL = float(os.getenv("DESKPET_TICK_SECONDS", "60"))
DECAY_RATES = {'mood': 0.8, 'cleanliness': 0.3, 'hunger': 1.0, 'energy': 0.5}
DAY_START_HOUR = 6
DAY_END_HOUR = 18
DAY_MULTIPLIERS = {'energy': 1.5, 'mood': 0.7}
NIGHT_MULTIPLIERS = {'energy': 0.5, 'hunger': 0.7}

# Single random modifier per tick
MODIFIER_BASE_CHANCE = 0.05
MODIFIER_NEED_CHANCE = 0.1
MODIFIER_WORST_BIAS = 0.7
MODIFIER_RELIEF = 0.5
MODIFIER_STRAIN = 2.0

# --- THRESHOLDS ---
HUNGER_NEED = 60
HUNGER_CRITICAL = 80
ENERGY_NEED = 40
MOOD_NEED = 50
NEED_FLOOR = 20
SICKNESS_CLEANLINESS = 15
HAPPY_MOOD = 70
TIRED_ENERGY = 30
LOW_STAT = 20

# --- SPECIAL EVENT CHANCES (per tick, checked in this order) ---
EVENT_CHANCES = {
    'mood_boost': 0.01,
    'self_learning': 0.02,
    'exercise': 0.015,
    'treasure': 0.01,
    'social': 0.015,
    'inspiration': 0.02,
    'sickness': 0.05,
}
TREASURE_ITEM_CHANCE = 0.2
EXERCISE_MIN_ENERGY = 30

# --- BUBBLES ---
BUBBLE_DURATION = 3.0
EVENT_BUBBLE_DURATION = 5.0
NOTIFY_DURATION = 3.0
NEED_BUBBLE_CHANCE = 0.15
NEED_MESSAGES = {
    'hunger': ["I'm a bit hungry...", "Is there any food?", "My tummy is rumbling..."],
    'energy': ["So sleepy...", "I could use a nap...", "*yawn*"],
    'mood': ["I'm bored...", "Play with me?", "Nothing to do..."],
}
# Severe lacks, checked in this order with one roll each
WARNING_BUBBLE_CHANCE = 0.3
WARNING_MESSAGES = {
    'mood': ["Not feeling great...", "A bit sad...", "Could use a hug..."],
    'hunger': ["So hungry...", "Want something to eat...", "Tummy is growling..."],
    'energy': ["So sleepy...", "Need a rest...", "About to doze off..."],
    'cleanliness': ["Feeling grubby...", "Need a wash...", "A bit dirty..."],
}

# --- ITEMS ---
ITEMS = {
    'basic_food': {'name': 'Basic Food', 'kind': 'food', 'description': 'Plain but filling.'},
    'tasty_snack': {'name': 'Tasty Snack', 'kind': 'food', 'description': 'A treat worth waiting for.'},
    'soap': {'name': 'Soap', 'kind': 'cleaning_supply', 'description': 'Gets the grime off.'},
    'bubble_bath': {'name': 'Bubble Bath', 'kind': 'cleaning_supply', 'description': 'Foamy and relaxing.'},
    'ball': {'name': 'Ball', 'kind': 'toy', 'description': 'Bouncy!'},
    'feather_wand': {'name': 'Feather Wand', 'kind': 'toy', 'description': 'Impossible to ignore.'},
}

# --- INTERACTIONS ---
# 'scaled' stat moves by the requested magnitude (times 'scale'); the other keys are fixed deltas.
INTERACTIONS = {
    'feed': {'scaled': 'hunger', 'scale': -1, 'mood': 5, 'exp': 2, 'energy_cost': 0, 'unlock_level': 1, 'pulse': 'eat-animation'},
    'clean': {'scaled': 'cleanliness', 'scale': 1, 'mood': 3, 'exp': 1, 'energy_cost': 0, 'unlock_level': 1, 'pulse': 'clean-animation'},
    'play': {'scaled': 'mood', 'scale': 1, 'exp': 3, 'energy_cost': 10, 'unlock_level': 1, 'pulse': 'play-animation'},
    'petting': {'scaled': 'mood', 'scale': 1, 'energy': 2, 'exp': 1, 'energy_cost': 0, 'unlock_level': 1, 'pulse': 'happy-animation'},
    'train': {'scaled': 'exp', 'scale': 1, 'mood': -5, 'energy_cost': 25, 'unlock_level': 3, 'pulse': 'train-animation'},
    'learn': {'scaled': 'exp', 'scale': 1, 'energy_cost': 30, 'unlock_level': 5, 'pulse': 'learn-animation'},
    'special': {'scaled': 'mood', 'scale': 1, 'energy': 10, 'exp': 3, 'energy_cost': 0, 'unlock_level': 8, 'pulse': 'spin-animation'},
}

# --- PROGRESSION ---
# condition types: interaction_count, status_threshold, level_reached, task_completed
ACHIEVEMENTS = {
    'firstInteraction': {
        'name': 'First Contact',
        'conditions': [{'type': 'interaction_count', 'interaction': 'any', 'count': 1}],
        'reward': {'exp': 10},
    },
    'feed10': {
        'name': 'Little Gourmet',
        'conditions': [{'type': 'interaction_count', 'interaction': 'feed', 'count': 10}],
        'reward': {'exp': 50},
    },
    'clean5': {
        'name': 'Squeaky Clean',
        'conditions': [{'type': 'interaction_count', 'interaction': 'clean', 'count': 5}],
        'reward': {'exp': 30},
    },
    'play20': {
        'name': 'Playmate',
        'conditions': [{'type': 'interaction_count', 'interaction': 'play', 'count': 20}],
        'reward': {'exp': 100, 'idle_animation': 'idleSpecial'},
    },
    'maxMood': {
        'name': 'Pure Joy',
        'conditions': [{'type': 'status_threshold', 'stat': 'mood', 'at_cap': True}],
        'reward': {'exp': 80},
    },
    'maxClean': {
        'name': 'Spotless',
        'conditions': [{'type': 'status_threshold', 'stat': 'cleanliness', 'at_cap': True}],
        'reward': {'exp': 80},
    },
    'level5Reached': {
        'name': 'Growing Up',
        'conditions': [{'type': 'level_reached', 'level': 5}],
        'reward': {'exp': 150},
    },
    'interactionNovice': {
        'name': 'Good Friends',
        'conditions': [{'type': 'interaction_count', 'interaction': 'any', 'count': 10}],
        'reward': {'exp': 20},
    },
}

# goal types: perform_interaction, reach_status, maintain_status ('level' counts as a stat)
TASKS = {
    'task_feed_1': {
        'name': 'First Meal',
        'goals': [{'type': 'perform_interaction', 'interaction': 'feed', 'count': 1}],
        'reward': {'exp': 10},
    },
    'task_clean_1': {
        'name': 'Bath Time',
        'goals': [{'type': 'perform_interaction', 'interaction': 'clean', 'count': 1}],
        'reward': {'exp': 10},
    },
    'task_play_3': {
        'name': 'Playtime',
        'goals': [{'type': 'perform_interaction', 'interaction': 'play', 'count': 3}],
        'reward': {'exp': 25},
        'repeatable': True,
    },
    'task_reach_mood_high': {
        'name': 'Good Spirits',
        'goals': [{'type': 'reach_status', 'stat': 'mood', 'target': 80}],
        'reward': {'exp': 50},
    },
    'task_stay_clean': {
        'name': 'Stay Fresh',
        'goals': [{'type': 'maintain_status', 'stat': 'cleanliness', 'target': 70, 'duration': 600.0}],
        'reward': {'exp': 40, 'items': ['soap']},
    },
    'task_reach_level_2': {
        'name': 'Level Up',
        'goals': [{'type': 'reach_status', 'stat': 'level', 'target': 2}],
        'prerequisites': {'level': 1},
        'reward': {'exp': 100, 'unlocks': ['expression_happy_lvl2']},
    },
    'task_foodie_5': {
        'name': 'Foodie',
        'goals': [{'type': 'perform_interaction', 'interaction': 'feed', 'count': 5}],
        'reward': {'exp': 20, 'items': ['tasty_snack']},
        'repeatable': True,
    },
    'task_playtime_10': {
        'name': 'Toy Collector',
        'goals': [{'type': 'perform_interaction', 'interaction': 'play', 'count': 10}],
        'reward': {'exp': 30, 'items': ['ball', 'feather_wand']},
        'repeatable': True,
    },
    'task_reach_level_3': {
        'name': 'Seasoned',
        'goals': [{'type': 'reach_status', 'stat': 'level', 'target': 3}],
        'prerequisites': {'level': 2, 'tasks': ['task_reach_level_2']},
        'reward': {'exp': 150, 'items': ['tasty_snack', 'tasty_snack']},
    },
}

STARTER_TASKS = ('task_feed_1', 'task_clean_1', 'task_play_3', 'task_reach_mood_high', 'task_reach_level_2')

# --- PET TYPES ---
PET_TYPES = {
    'default': {
        'name': 'Blob',
        'expressions': {
            'normal': '😊', 'happy': '😄', 'hungry': '😋', 'sleepy': '😴', 'sick': '🤢',
            'level5': '😎', 'level10': '🤩', 'level15': '👑',
            'look_left': '👈', 'look_right': '👉', 'look_up': '👆', 'look_down': '👇',
            'look_up_left': '🤔', 'look_up_right': '🙄', 'look_down_left': '😔', 'look_down_right': '😌',
        },
    },
    'leafy': {
        'name': 'Leafy',
        'expressions': {'normal': '🌱', 'happy': '🌿', 'hungry': '🥀', 'sleepy': '🍂', 'level5': '🌳'},
    },
    'droplet': {
        'name': 'Droplet',
        'expressions': {'normal': '💧', 'happy': '💦', 'hungry': '🌵', 'sleepy': '🌫️', 'level5': '🌊'},
    },
}
DEFAULT_PET_TYPE = 'default'
# (level floor, expression key), highest tier first
FLAVOR_TIERS = [(15, 'level15'), (10, 'level10'), (5, 'level5')]
FLAVOR_CHANCE = 0.3

# --- ANIMATIONS (seconds) ---
ANIMATION_DURATIONS = {
    'happy-animation': 0.6,
    'pulse-animation': 0.5,
    'wiggle-animation': 0.4,
    'shake-animation': 0.4,
    'fast-shake-animation': 0.3,
    'jump-animation': 0.5,
    'spin-animation': 0.6,
    'play-animation': 0.6,
    'train-animation': 0.7,
    'clean-animation': 0.6,
    'learn-animation': 0.7,
    'sleep-animation': 1.5,
    'eat-animation': 0.5,
    'tired-animation': 0.6,
    'thinking-animation': 0.7,
    'distracted-animation': 0.6,
    'sick-animation': 1.0,
    'blink-animation': 0.3,
    'stretch-animation': 0.8,
    'idle-wiggle-animation': 0.6,
    'idleSpecial': 1.0,
}
DEFAULT_PULSE_DURATION = 0.5
# Status-meter flashes, shown alongside whatever the pet itself is doing
STATUS_CHANGE_DURATION = 0.5
STATUS_CHANGE_ANIMATIONS = {'feed': 'increase-positive', 'petting': 'increase-positive'}
RECOVERY_ANIMATION = 'recovery-positive'
PICKED_UP_DURATION = 0.3
LANDED_DURATION = 0.4
EXPRESSION_OVERRIDE_DURATION = 1.5

# --- GESTURES (seconds / pixels) ---
FAST_MOVE_SPEED = 800.0  # px/s
SLOW_MOVE_SPEED = FAST_MOVE_SPEED / 3
HOVER_CANCEL_SPEED = 50.0
MIN_SPEED_DT = 0.01
SPEED_WINDOW = 0.1
PETTING_WINDOW = 0.8
CIRCLING_WINDOW = 1.0
HOVER_DELAY = 0.3
CLICK_MAX_DURATION = 0.3
DOUBLE_CLICK_WINDOW = 0.3
LONG_PRESS_DELAY = 0.6
CLICK_JITTER = 2
REACTION_DURATION = 0.6
FAST_REACTION_DURATION = 0.4
LONG_REACTION_FACTOR = 1.5
PETTING_MIN_POINTS = 5
PETTING_MIN_DISTANCE = 50
PETTING_MAX_DISTANCE = 300
CIRCLING_MIN_POINTS = 8
CIRCLING_MIN_ANGLE = 1.5  # multiples of pi
CIRCLING_REACH = 2.0  # loops count inside the pet rect scaled by this
EYE_DEAD_ZONE = 0.15  # fraction of pet width

REACTION_ANIMATIONS = {
    'fast-flick': 'look-around-fast',
    'petting': 'being-pet-animation',
    'circle-clockwise': 'circle-clockwise-animation',
    'circle-counterclockwise': 'circle-counterclockwise-animation',
    'double-click': 'double-click-animation',
    'long-press': 'long-press-animation',
    'hover-tilt': 'tilt-head',
}
# Gestures that also count as a petting interaction
GESTURE_INTERACTIONS = {'click': ('petting', 10), 'petting': ('petting', 15)}

# --- AUTONOMOUS BEHAVIOUR (seconds) ---
IDLE_DELAY = (8.0, 15.0)
IDLE_DELAY_HAPPY = (6.0, 12.0)
IDLE_DELAY_LOW = (12.0, 20.0)
IDLE_HAPPY_FLOOR = 80
IDLE_LOW_CEILING = 25
IDLE_MIN_STAT = 30
BASE_IDLE_POSES = ['stretch-animation', 'idle-wiggle-animation']
IDLE_POOLS = {
    'tired': ['stretch-animation'],
    'happy': ['idle-wiggle-animation'],
    'neutral': ['stretch-animation', 'idle-wiggle-animation'],
}
BLINK_INTERVAL = (2.0, 10.0)
BLINK_MIN_STAT = 25
BLINK_RETRY = 1.0
RELOCATE_INTERVAL = 15.0
RELOCATE_JITTER = 0.2
RELOCATE_DURATION = 1.0
RELOCATE_DISTANCE = (30.0, 150.0)
EDGE_PADDING = 20
# Chasing a fast-moving pointer
CHASE_TRIGGER_SPEED = FAST_MOVE_SPEED
CHASE_DETECTION_RADIUS = 200.0
CHASE_MIN_DISTANCE = 20.0
CHASE_MAX_STEP = 100.0
CHASE_STEP_FRACTION = 0.6
CHASE_DURATION = 0.8
CHASE_COOLDOWN = 1.5

# --- SHELL COMMANDS ---
SHELL_COMMANDS = ('take-photo', 'open-settings', 'minimize', 'exit')
