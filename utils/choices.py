from discord import app_commands
from humanize import intcomma

# Values are Wise Old Man metric names

WILDY_BOSSES = {
    "King Black Dragon": "king_black_dragon",
    "Scorpia": "scorpia",
    "Artio": "artio",
    "Callisto": "callisto",
    "Calvarion": "calvarion",
    "Chaos Elemental": "chaos_elemental",
    "Chaos Fanatic": "chaos_fanatic",
    "Crazy Archaeologist": "crazy_archaeologist",
    "Spindel": "spindel",
    "Venenatis": "venenatis",
    "Vet'ion": "vetion",
}

GROUP_BOSSES = {
    "Corporeal Beast": "corporeal_beast",
    "Nex": "nex",
    "Nightmare": "nightmare",
    "Commander Zilyana (Saradomin)": "commander_zilyana",
    "K'ril Tsutsaroth (Zamorak)": "kril_tsutsaroth",
    "General Graardor (Bandos)": "general_graardor",
    "Kree'arra (Armadyl)": "kreearra",
}

QUEST_BOSSES = {
    "Duke Sucellus": "duke_sucellus",
    "The Leviathan": "the_leviathan",
    "The Whisperer": "the_whisperer",
    "Vardorvis": "vardorvis",
    "Phantom Muspah": "phantom_muspah",
    "The Gauntlet": "the_gauntlet",
    "The Corrupted Gauntlet": "the_corrupted_gauntlet",
    "Vorkath": "vorkath",
    "Zalcano": "zalcano",
}

SLAYER_BOSSES = {
    "Grotesque Guardians": "grotesque_guardians",
    "Abyssal Sire": "abyssal_sire",
    "Alchemical Hydra": "alchemical_hydra",
    "Thermonuclear Smoke Devil": "thermonuclear_smoke_devil",
    "Kraken": "kraken",
    "Cerberus": "cerberus",
}

WORLD_BOSSES = {
    "Barrows Chests": "barrows_chests",
    "Giant Mole": "giant_mole",
    "Deranged Archaeologist": "deranged_archaeologist",
    "Dagannoth Prime": "dagannoth_prime",
    "Dagannoth Rex": "dagannoth_rex",
    "Dagannoth Supreme": "dagannoth_supreme",
    "Sarachnis": "sarachnis",
    "Kalphite Queen": "kalphite_queen",
    "Skotizo": "skotizo",
}

# non-combat skills only
SKILLS = {
    name.capitalize(): name
    for name in [
        "prayer",
        "cooking",
        "woodcutting",
        "fletching",
        "fishing",
        "firemaking",
        "crafting",
        "smithing",
        "mining",
        "herblore",
        "agility",
        "thieving",
        "slayer",
        "farming",
        "runecraft",
        "hunter",
        "construction",
    ]
}


def to_choices(options: dict[str, str]) -> list[app_commands.Choice[str]]:
    return [app_commands.Choice(name=name, value=value) for name, value in options.items()]


def format_activity_name(metric: str) -> str:
    """snake_case metric to a display name, "king_black_dragon" -> "King Black Dragon" """
    return " ".join(word.capitalize() for word in metric.split("_") if word)


def format_number(n: int) -> str:
    return intcomma(n)
