"""
Canonical code catalog for geo redirects.

The admin surface shows one row per entry, in this order. Sanitized rule
sets are always total over these lists.
"""

from __future__ import annotations

from .models import Category

STATE_NAMES: dict[str, str] = {
    "AL": "Alabama",
    "AK": "Alaska",
    "AZ": "Arizona",
    "AR": "Arkansas",
    "CA": "California",
    "CO": "Colorado",
    "CT": "Connecticut",
    "DE": "Delaware",
    "FL": "Florida",
    "GA": "Georgia",
    "HI": "Hawaii",
    "ID": "Idaho",
    "IL": "Illinois",
    "IN": "Indiana",
    "IA": "Iowa",
    "KS": "Kansas",
    "KY": "Kentucky",
    "LA": "Louisiana",
    "ME": "Maine",
    "MD": "Maryland",
    "MA": "Massachusetts",
    "MI": "Michigan",
    "MN": "Minnesota",
    "MS": "Mississippi",
    "MO": "Missouri",
    "MT": "Montana",
    "NE": "Nebraska",
    "NV": "Nevada",
    "NH": "New Hampshire",
    "NJ": "New Jersey",
    "NM": "New Mexico",
    "NY": "New York",
    "NC": "North Carolina",
    "ND": "North Dakota",
    "OH": "Ohio",
    "OK": "Oklahoma",
    "OR": "Oregon",
    "PA": "Pennsylvania",
    "RI": "Rhode Island",
    "SC": "South Carolina",
    "SD": "South Dakota",
    "TN": "Tennessee",
    "TX": "Texas",
    "UT": "Utah",
    "VT": "Vermont",
    "VA": "Virginia",
    "WA": "Washington",
    "WV": "West Virginia",
    "WI": "Wisconsin",
    "WY": "Wyoming",
}

COUNTRY_NAMES: dict[str, str] = {
    "AT": "Austria",
    "BE": "Belgium",
    "BG": "Bulgaria",
    "HR": "Croatia",
    "CY": "Cyprus",
    "CZ": "Czech Republic",
    "DK": "Denmark",
    "EE": "Estonia",
    "FI": "Finland",
    "FR": "France",
    "DE": "Germany",
    "GR": "Greece",
    "HU": "Hungary",
    "IE": "Ireland",
    "IT": "Italy",
    "LV": "Latvia",
    "LT": "Lithuania",
    "LU": "Luxembourg",
    "MT": "Malta",
    "NL": "Netherlands",
    "PL": "Poland",
    "PT": "Portugal",
    "RO": "Romania",
    "SK": "Slovakia",
    "SI": "Slovenia",
    "ES": "Spain",
    "SE": "Sweden",
    "GB": "United Kingdom",
    "NO": "Norway",
    "IS": "Iceland",
    "LI": "Liechtenstein",
    "CN": "China",
    "RU": "Russia",
    "IR": "Iran",
    "KP": "North Korea",
    "IN": "India",
    "BR": "Brazil",
    "VN": "Vietnam",
    "TR": "Turkey",
    "UA": "Ukraine",
}

_NAMES_BY_CATEGORY: dict[Category, dict[str, str]] = {
    Category.STATES: STATE_NAMES,
    Category.COUNTRIES: COUNTRY_NAMES,
}


def code_names(category: Category | str) -> dict[str, str]:
    """Return ``code -> display name`` for a category, in catalog order."""
    return dict(_NAMES_BY_CATEGORY[Category(category)])


def canonical_codes(category: Category | str) -> tuple[str, ...]:
    """Return the ordered canonical codes for a category."""
    return tuple(_NAMES_BY_CATEGORY[Category(category)])
