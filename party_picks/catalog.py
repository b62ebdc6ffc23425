"""
Category catalog for Super Bowl LX.

The catalog is static configuration shared by every component: fifteen
categories in three groups, each with a set of mutually exclusive options.
It is validated once at import time.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from party_picks.errors import InvalidOption, UnknownCategory

CATEGORY_TYPES = ("outcome", "player", "fun")


@dataclass(frozen=True)
class Option:
    id: str
    label: str
    sublabel: Optional[str] = None

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {"id": self.id, "label": self.label, "sublabel": self.sublabel}


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    icon: str
    type: str
    options: Tuple[Option, ...] = field(default_factory=tuple)

    def option_ids(self) -> List[str]:
        return [option.id for option in self.options]

    def get_option(self, option_id: str) -> Optional[Option]:
        for option in self.options:
            if option.id == option_id:
                return option
        return None

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "icon": self.icon,
            "type": self.type,
            "options": [option.to_dict() for option in self.options],
        }


def _category(category_id, name, icon, category_type, *options):
    return Category(
        id=category_id,
        name=name,
        icon=icon,
        type=category_type,
        options=tuple(Option(*opt) for opt in options),
    )


CATEGORIES: Tuple[Category, ...] = (
    # Game outcome
    _category(
        "winner", "Super Bowl Winner", "Trophy", "outcome",
        ("seahawks", "Seattle Seahawks", "NFC Champions"),
        ("patriots", "New England Patriots", "AFC Champions"),
    ),
    _category(
        "margin", "Winning Margin", "ChartBar", "outcome",
        ("1-3", "1-3 points", "Nail-biter"),
        ("4-7", "4-7 points", "Close game"),
        ("8-14", "8-14 points", "Comfortable"),
        ("15-21", "15-21 points", "Dominant"),
        ("22+", "22+ points", "Blowout"),
    ),
    _category(
        "total-points", "Total Points", "Target", "outcome",
        ("under", "Under 44.5", "Defense wins"),
        ("over", "Over 44.5", "Shootout"),
    ),
    _category(
        "first-half", "First Half Winner", "Timer", "outcome",
        ("seahawks", "Seattle Seahawks"),
        ("patriots", "New England Patriots"),
        ("tie", "Tie", "Halftime deadlock"),
    ),
    _category(
        "first-to-score", "First Team to Score", "NumberCircleOne", "outcome",
        ("seahawks", "Seattle Seahawks"),
        ("patriots", "New England Patriots"),
    ),
    # Player props
    _category(
        "mvp", "Super Bowl MVP", "Star", "player",
        ("geno-smith", "Geno Smith", "SEA · QB"),
        ("drake-maye", "Drake Maye", "NE · QB"),
        ("dk-metcalf", "DK Metcalf", "SEA · WR"),
        ("jaxon-smith-njigba", "Jaxon Smith-Njigba", "SEA · WR"),
        ("kenneth-walker", "Kenneth Walker III", "SEA · RB"),
        ("rhamondre-stevenson", "Rhamondre Stevenson", "NE · RB"),
        ("hunter-henry", "Hunter Henry", "NE · TE"),
        ("defensive-player", "Defensive Player", "Any team"),
    ),
    _category(
        "first-td", "First TD Scorer", "PersonSimpleRun", "player",
        ("dk-metcalf", "DK Metcalf", "SEA · WR"),
        ("jaxon-smith-njigba", "Jaxon Smith-Njigba", "SEA · WR"),
        ("kenneth-walker", "Kenneth Walker III", "SEA · RB"),
        ("tyler-lockett", "Tyler Lockett", "SEA · WR"),
        ("noah-fant", "Noah Fant", "SEA · TE"),
        ("rhamondre-stevenson", "Rhamondre Stevenson", "NE · RB"),
        ("hunter-henry", "Hunter Henry", "NE · TE"),
        ("demario-douglas", "DeMario Douglas", "NE · WR"),
        ("kayshon-boutte", "Kayshon Boutte", "NE · WR"),
        ("antonio-gibson", "Antonio Gibson", "NE · RB"),
        ("other", "Other / Defense / ST", "Anyone else"),
    ),
    _category(
        "passing-yards", "Most Passing Yards", "Football", "player",
        ("geno-smith", "Geno Smith", "SEA · QB"),
        ("drake-maye", "Drake Maye", "NE · QB"),
    ),
    _category(
        "rushing-yards", "Most Rushing Yards", "SneakerMove", "player",
        ("kenneth-walker", "Kenneth Walker III", "SEA · RB"),
        ("zach-charbonnet", "Zach Charbonnet", "SEA · RB"),
        ("rhamondre-stevenson", "Rhamondre Stevenson", "NE · RB"),
        ("antonio-gibson", "Antonio Gibson", "NE · RB"),
    ),
    _category(
        "receiving-yards", "Most Receiving Yards", "HandGrabbing", "player",
        ("dk-metcalf", "DK Metcalf", "SEA · WR"),
        ("jaxon-smith-njigba", "Jaxon Smith-Njigba", "SEA · WR"),
        ("tyler-lockett", "Tyler Lockett", "SEA · WR"),
        ("noah-fant", "Noah Fant", "SEA · TE"),
        ("hunter-henry", "Hunter Henry", "NE · TE"),
        ("demario-douglas", "DeMario Douglas", "NE · WR"),
    ),
    # Fun props
    _category(
        "coin-toss", "Coin Toss", "CurrencyCircleDollar", "fun",
        ("heads", "Heads"),
        ("tails", "Tails"),
    ),
    _category(
        "anthem-length", "National Anthem Length", "Microphone", "fun",
        ("under", "Under 2:00", "Quick & efficient"),
        ("over", "Over 2:00", "The full experience"),
    ),
    _category(
        "gatorade", "Gatorade Shower Color", "Drop", "fun",
        ("orange", "Orange"),
        ("blue", "Blue"),
        ("yellow", "Yellow / Green"),
        ("red", "Red / Pink"),
        ("purple", "Purple"),
        ("clear", "Clear / Water"),
    ),
    _category(
        "first-score-type", "First Scoring Play", "ListNumbers", "fun",
        ("td-pass", "Passing TD"),
        ("td-rush", "Rushing TD"),
        ("fg", "Field Goal"),
        ("safety", "Safety", "Bold pick!"),
    ),
    _category(
        "q1-turnover", "Turnover in Q1?", "ArrowsClockwise", "fun",
        ("yes", "Yes", "Early chaos"),
        ("no", "No", "Clean start"),
    ),
)

CATEGORY_GROUPS = {
    "outcome": {"title": "Game Outcome", "subtitle": "Predict the final result"},
    "player": {"title": "Player Props", "subtitle": "Who will shine brightest?"},
    "fun": {"title": "Fun Props", "subtitle": "The wild cards"},
}


def validate_catalog(categories=CATEGORIES):
    """Return a list of problems with the catalog (empty when valid)"""
    problems = []
    seen_categories = set()

    for category in categories:
        if category.id in seen_categories:
            problems.append(f"Duplicate category id: {category.id}")
        seen_categories.add(category.id)

        if category.type not in CATEGORY_TYPES:
            problems.append(f"Category {category.id} has unknown type {category.type}")

        if not category.options:
            problems.append(f"Category {category.id} has no options")

        seen_options = set()
        for option in category.options:
            if option.id in seen_options:
                problems.append(
                    f"Duplicate option id {option.id} in category {category.id}"
                )
            seen_options.add(option.id)

    return problems


_problems = validate_catalog()
if _problems:
    raise RuntimeError("Invalid category catalog: " + "; ".join(_problems))

_BY_ID = {category.id: category for category in CATEGORIES}


def get_category(category_id):
    """Look up a category by id, raising UnknownCategory if absent"""
    category = _BY_ID.get(category_id)
    if category is None:
        raise UnknownCategory(f"Unknown category: {category_id}")
    return category


def validate_selection(category_id, option_id):
    """Ensure option_id is one of the category's options"""
    category = get_category(category_id)
    if category.get_option(option_id) is None:
        raise InvalidOption(
            f"'{option_id}' is not an option for {category.name}",
            category=category_id,
        )
    return category


def category_ids():
    return list(_BY_ID)


def grouped_categories():
    """Catalog grouped for display, in catalog order"""
    groups = []
    for key, meta in CATEGORY_GROUPS.items():
        groups.append(
            {
                "key": key,
                "title": meta["title"],
                "subtitle": meta["subtitle"],
                "categories": [c.to_dict() for c in CATEGORIES if c.type == key],
            }
        )
    return groups
