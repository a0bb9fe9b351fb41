# petsar/utils/pet_behavior.py
"""
Behavioural constants for lost pets: species, sizes, temperaments, weather and
terrain vocabularies, and the fixed offsets used by the location heuristics.
"""

SPECIES_DOG = "dog"
SPECIES_CAT = "cat"
SPECIES_OTHER = "other"

# Pet records come from a bilingual form, so both spellings are accepted
SPECIES_ALIASES = {
    "dog": SPECIES_DOG,
    "犬": SPECIES_DOG,
    "cat": SPECIES_CAT,
    "猫": SPECIES_CAT,
}

PET_SIZE_SMALL = "small"
PET_SIZE_MEDIUM = "medium"
PET_SIZE_LARGE = "large"
PET_SIZES = (PET_SIZE_SMALL, PET_SIZE_MEDIUM, PET_SIZE_LARGE)

BEHAVIOR_FRIENDLY = "friendly"
BEHAVIOR_SHY = "shy"
BEHAVIOR_AGGRESSIVE = "aggressive"

# Conditions understood by the probability calculator
WEATHER_CLEAR = "clear"
WEATHER_CLOUDY = "cloudy"
WEATHER_RAIN = "rain"
WEATHER_SNOW = "snow"

# Conditions reported by the weather lookup collaborator
CONDITION_SUNNY = "sunny"
CONDITION_CLOUDY = "cloudy"
CONDITION_RAINY = "rainy"
CONDITION_STORMY = "stormy"
CONDITION_SNOWY = "snowy"

URBAN_DENSITY_HIGH = "high"
URBAN_DENSITY_MEDIUM = "medium"
URBAN_DENSITY_LOW = "low"

TERRAIN_FACTORS = {
    "residential": 1.1,
    "park": 1.2,
    "forest": 0.7,
    "commercial": 0.9,
    "water": 0.5,
    "road": 0.8,
}

# (lat offset, lng offset, confidence, radius in meters, reason)
SPECIES_PATTERNS = {
    SPECIES_DOG: (0.01, 0.01, 0.7, 1000, "Dogs roam widely while exploring"),
    SPECIES_CAT: (0.003, 0.003, 0.75, 300, "Cats stay close and hide inside their territory"),
    SPECIES_OTHER: (0.005, 0.005, 0.5, 500, "Typical movement range"),
}

HOMING_CONFIDENCE = 0.8
HOMING_RADIUS_M = 500

MORNING_PATTERN = (0.008, 0.0, 0.6, 600, "Movement during morning activity hours")
EVENING_PATTERN = (-0.008, 0.0, 0.65, 700, "Movement during evening activity hours")
NIGHT_PATTERN = (0.002, 0.002, 0.7, 200, "Night-time hiding spot")

ENVIRONMENTAL_PATTERNS = (
    (0.006, -0.006, 0.55, 400, "Possible movement toward a park or green space"),
    (-0.005, 0.007, 0.5, 500, "Possible movement toward a water source (river or pond)"),
)

POPULAR_PLACE_OFFSET = (0.003, 0.002)
QUIET_PLACE_OFFSET = (-0.002, -0.003)


def normalize_species(species):
    """
    Map a free-form species string onto SPECIES_DOG, SPECIES_CAT or SPECIES_OTHER.

    Args:
        species (str | None): Species as stored on the pet record.

    Returns:
        str: The canonical species key.
    """
    if not species:
        return SPECIES_OTHER
    return SPECIES_ALIASES.get(species.strip().lower(), SPECIES_OTHER)


def get_terrain_factor(terrain_type):
    """Multiplier for a land-use category; unknown or unset terrain is neutral."""
    if not terrain_type:
        return 1.0
    return TERRAIN_FACTORS.get(terrain_type, 1.0)
