"""
Static lookup data for impact estimation.

Plain immutable tables plus the lookup functions over them:
- energy use per token by model (kWh/token)
- static CO2 factors by named region (kgCO2/kWh), used by the calculator
- average grid intensity by named region (gCO2/kWh), used as the resolver's
  fallback when live data is unavailable
- ISO country code -> named region catalog
- equivalence constants (kg CO2 per unit of activity)

Values are research averages and conservative estimates; they are reference
data, not measurements.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from domain.errors import ConfigurationError

GLOBAL_AVERAGE = "global-average"
RENEWABLE = "renewable"

# Regions that always use the static table, even when live data is requested.
STATIC_ONLY_REGIONS = frozenset({GLOBAL_AVERAGE, RENEWABLE})


# ============================================================================
# Models
# ============================================================================

DEFAULT_MODEL_KEY = "default"

# kWh per token (inference)
ENERGY_PER_TOKEN_KWH: Mapping[str, float] = MappingProxyType({
    "gpt3": 0.0000043,
    "gpt4": 0.0000086,  # estimated 2x GPT-3
    "claude": 0.0000065,
    "gemini": 0.0000055,
    DEFAULT_MODEL_KEY: 0.000006,
})

MODEL_DISPLAY_NAMES: Mapping[str, str] = MappingProxyType({
    "gpt3": "GPT-3 (OpenAI)",
    "gpt4": "GPT-4 (OpenAI)",
    "claude": "Claude (Anthropic)",
    "gemini": "Gemini (Google)",
    DEFAULT_MODEL_KEY: "Average Model",
})


# ============================================================================
# Static regional CO2 factors (kg CO2 / kWh)
# ============================================================================

STATIC_CO2_FACTORS_KG_PER_KWH: Mapping[str, float] = MappingProxyType({
    GLOBAL_AVERAGE: 0.475,
    "usa-average": 0.416,
    "europe-average": 0.276,
    "china-average": 0.581,
    "canada-average": 0.130,
    "iowa-usa": 0.737,
    "quebec-canada": 0.020,
    RENEWABLE: 0.050,
})

STATIC_REGION_DISPLAY_NAMES: Mapping[str, str] = MappingProxyType({
    GLOBAL_AVERAGE: "Global Average",
    "usa-average": "USA Average",
    "europe-average": "Europe Average",
    "china-average": "China Average",
    "canada-average": "Canada Average",
    "iowa-usa": "Iowa, USA (High Carbon)",
    "quebec-canada": "Quebec, Canada (Low Carbon)",
    RENEWABLE: "Renewable Energy",
})

_EU_MEMBER_CODES = (
    "AT", "BE", "BG", "HR", "CY", "CZ", "DK", "EE", "FI", "FR", "DE", "GR", "HU", "IE",
    "IT", "LV", "LT", "LU", "MT", "NL", "PL", "PT", "RO", "SK", "SI", "ES", "SE",
)

# Country codes accepted by the static table as shorthand for its named regions.
STATIC_REGION_ALIASES: Mapping[str, str] = MappingProxyType({
    "US": "usa-average",
    "CA": "canada-average",
    "CN": "china-average",
    **{code: "europe-average" for code in _EU_MEMBER_CODES},
})


# ============================================================================
# Fallback grid intensity by named region (g CO2 / kWh)
# ============================================================================

_REGIONAL_AVERAGE_G_PER_KWH = 456.0

_REGIONAL_AVERAGE_REGIONS = (
    "egypt", "thailand", "vietnam", "philippines", "malaysia",
    "singapore", "taiwan", "hong-kong", "israel", "uae",
    "qatar", "kuwait", "bahrain", "oman", "jordan",
    "lebanon", "syria", "iraq", "afghanistan", "pakistan",
    "bangladesh", "sri-lanka", "nepal", "bhutan", "myanmar",
    "cambodia", "laos", "mongolia", "kazakhstan", "uzbekistan",
    "turkmenistan", "tajikistan", "kyrgyzstan", "azerbaijan", "armenia",
    "georgia", "ukraine", "belarus", "moldova", "romania",
    "bulgaria", "croatia", "slovenia", "slovakia", "czech-republic",
    "poland", "hungary", "austria", "switzerland", "liechtenstein",
    "luxembourg", "belgium", "netherlands", "denmark", "sweden",
    "norway", "finland", "iceland", "ireland", "portugal",
    "spain", "italy", "malta", "cyprus", "greece",
    "estonia", "latvia", "lithuania", "argentina", "chile",
    "colombia", "peru", "venezuela", "ecuador", "bolivia",
    "paraguay", "uruguay", "guyana", "suriname", "french-guiana",
    "new-zealand", "fiji", "papua-new-guinea", "solomon-islands", "vanuatu",
    "samoa", "tonga", "kiribati", "tuvalu", "nauru",
    "palau", "marshall-islands", "micronesia", "cook-islands", "niue",
    "tokelau",
)

FALLBACK_INTENSITY_G_PER_KWH: Mapping[str, float] = MappingProxyType({
    GLOBAL_AVERAGE: 475.0,
    "united-states": 386.0,
    "europe": 276.0,
    "china": 681.0,
    "india": 708.0,
    "canada": 130.0,
    "france": 52.0,
    "germany": 338.0,
    "united-kingdom": 193.0,
    "australia": 709.0,
    "brazil": 89.0,
    "japan": 465.0,
    "south-korea": 415.0,
    "russia": 331.0,
    "south-africa": 928.0,
    "mexico": 449.0,
    "indonesia": 619.0,
    "turkey": 429.0,
    "iran": 486.0,
    "saudi-arabia": 505.0,
    **{region: _REGIONAL_AVERAGE_G_PER_KWH for region in _REGIONAL_AVERAGE_REGIONS},
})


# ============================================================================
# Country catalog: (ISO code, named region, display name)
# ============================================================================

COUNTRY_CATALOG: Tuple[Tuple[str, str, str], ...] = (
    ("US", "united-states", "United States"),
    ("CA", "canada", "Canada"),
    ("MX", "mexico", "Mexico"),
    ("BR", "brazil", "Brazil"),
    ("AR", "argentina", "Argentina"),
    ("CL", "chile", "Chile"),
    ("CO", "colombia", "Colombia"),
    ("PE", "peru", "Peru"),
    ("VE", "venezuela", "Venezuela"),
    ("EC", "ecuador", "Ecuador"),
    ("BO", "bolivia", "Bolivia"),
    ("PY", "paraguay", "Paraguay"),
    ("UY", "uruguay", "Uruguay"),
    ("GY", "guyana", "Guyana"),
    ("SR", "suriname", "Suriname"),
    ("GF", "french-guiana", "French Guiana"),
    ("GB", "united-kingdom", "United Kingdom"),
    ("FR", "france", "France"),
    ("DE", "germany", "Germany"),
    ("IT", "italy", "Italy"),
    ("ES", "spain", "Spain"),
    ("PT", "portugal", "Portugal"),
    ("NL", "netherlands", "Netherlands"),
    ("BE", "belgium", "Belgium"),
    ("CH", "switzerland", "Switzerland"),
    ("AT", "austria", "Austria"),
    ("SE", "sweden", "Sweden"),
    ("NO", "norway", "Norway"),
    ("DK", "denmark", "Denmark"),
    ("FI", "finland", "Finland"),
    ("IS", "iceland", "Iceland"),
    ("IE", "ireland", "Ireland"),
    ("PL", "poland", "Poland"),
    ("CZ", "czech-republic", "Czech Republic"),
    ("SK", "slovakia", "Slovakia"),
    ("HU", "hungary", "Hungary"),
    ("RO", "romania", "Romania"),
    ("BG", "bulgaria", "Bulgaria"),
    ("HR", "croatia", "Croatia"),
    ("SI", "slovenia", "Slovenia"),
    ("EE", "estonia", "Estonia"),
    ("LV", "latvia", "Latvia"),
    ("LT", "lithuania", "Lithuania"),
    ("GR", "greece", "Greece"),
    ("CY", "cyprus", "Cyprus"),
    ("MT", "malta", "Malta"),
    ("LU", "luxembourg", "Luxembourg"),
    ("LI", "liechtenstein", "Liechtenstein"),
    ("MC", "monaco", "Monaco"),
    ("SM", "san-marino", "San Marino"),
    ("VA", "vatican", "Vatican City"),
    ("AD", "andorra", "Andorra"),
    ("CN", "china", "China"),
    ("IN", "india", "India"),
    ("JP", "japan", "Japan"),
    ("KR", "south-korea", "South Korea"),
    ("TH", "thailand", "Thailand"),
    ("VN", "vietnam", "Vietnam"),
    ("PH", "philippines", "Philippines"),
    ("MY", "malaysia", "Malaysia"),
    ("SG", "singapore", "Singapore"),
    ("ID", "indonesia", "Indonesia"),
    ("TW", "taiwan", "Taiwan"),
    ("HK", "hong-kong", "Hong Kong"),
    ("MO", "macau", "Macau"),
    ("MN", "mongolia", "Mongolia"),
    ("KZ", "kazakhstan", "Kazakhstan"),
    ("UZ", "uzbekistan", "Uzbekistan"),
    ("TM", "turkmenistan", "Turkmenistan"),
    ("TJ", "tajikistan", "Tajikistan"),
    ("KG", "kyrgyzstan", "Kyrgyzstan"),
    ("AF", "afghanistan", "Afghanistan"),
    ("PK", "pakistan", "Pakistan"),
    ("BD", "bangladesh", "Bangladesh"),
    ("LK", "sri-lanka", "Sri Lanka"),
    ("NP", "nepal", "Nepal"),
    ("BT", "bhutan", "Bhutan"),
    ("MV", "maldives", "Maldives"),
    ("MM", "myanmar", "Myanmar"),
    ("LA", "laos", "Laos"),
    ("KH", "cambodia", "Cambodia"),
    ("BN", "brunei", "Brunei"),
    ("TL", "east-timor", "East Timor"),
    ("AU", "australia", "Australia"),
    ("NZ", "new-zealand", "New Zealand"),
    ("FJ", "fiji", "Fiji"),
    ("PG", "papua-new-guinea", "Papua New Guinea"),
    ("SB", "solomon-islands", "Solomon Islands"),
    ("VU", "vanuatu", "Vanuatu"),
    ("NC", "new-caledonia", "New Caledonia"),
    ("PF", "french-polynesia", "French Polynesia"),
    ("WS", "samoa", "Samoa"),
    ("TO", "tonga", "Tonga"),
    ("KI", "kiribati", "Kiribati"),
    ("TV", "tuvalu", "Tuvalu"),
    ("NR", "nauru", "Nauru"),
    ("PW", "palau", "Palau"),
    ("MH", "marshall-islands", "Marshall Islands"),
    ("FM", "micronesia", "Micronesia"),
    ("CK", "cook-islands", "Cook Islands"),
    ("NU", "niue", "Niue"),
    ("TK", "tokelau", "Tokelau"),
    ("WF", "wallis-futuna", "Wallis and Futuna"),
    ("AS", "american-samoa", "American Samoa"),
    ("GU", "guam", "Guam"),
    ("MP", "northern-mariana-islands", "Northern Mariana Islands"),
    ("VI", "us-virgin-islands", "US Virgin Islands"),
    ("PR", "puerto-rico", "Puerto Rico"),
    ("RU", "russia", "Russia"),
    ("UA", "ukraine", "Ukraine"),
    ("BY", "belarus", "Belarus"),
    ("MD", "moldova", "Moldova"),
    ("GE", "georgia", "Georgia"),
    ("AM", "armenia", "Armenia"),
    ("AZ", "azerbaijan", "Azerbaijan"),
    ("TR", "turkey", "Turkey"),
    ("IR", "iran", "Iran"),
    ("IQ", "iraq", "Iraq"),
    ("SY", "syria", "Syria"),
    ("LB", "lebanon", "Lebanon"),
    ("JO", "jordan", "Jordan"),
    ("IL", "israel", "Israel"),
    ("PS", "palestine", "Palestine"),
    ("SA", "saudi-arabia", "Saudi Arabia"),
    ("AE", "uae", "United Arab Emirates"),
    ("QA", "qatar", "Qatar"),
    ("BH", "bahrain", "Bahrain"),
    ("KW", "kuwait", "Kuwait"),
    ("OM", "oman", "Oman"),
    ("YE", "yemen", "Yemen"),
    ("EG", "egypt", "Egypt"),
    ("LY", "libya", "Libya"),
    ("TN", "tunisia", "Tunisia"),
    ("DZ", "algeria", "Algeria"),
    ("MA", "morocco", "Morocco"),
    ("SD", "sudan", "Sudan"),
    ("SS", "south-sudan", "South Sudan"),
    ("ET", "ethiopia", "Ethiopia"),
    ("ER", "eritrea", "Eritrea"),
    ("DJ", "djibouti", "Djibouti"),
    ("SO", "somalia", "Somalia"),
    ("KE", "kenya", "Kenya"),
    ("UG", "uganda", "Uganda"),
    ("TZ", "tanzania", "Tanzania"),
    ("RW", "rwanda", "Rwanda"),
    ("BI", "burundi", "Burundi"),
    ("CD", "congo-democratic", "Democratic Republic of Congo"),
    ("CG", "congo", "Congo"),
    ("CF", "central-african-republic", "Central African Republic"),
    ("TD", "chad", "Chad"),
    ("CM", "cameroon", "Cameroon"),
    ("GQ", "equatorial-guinea", "Equatorial Guinea"),
    ("GA", "gabon", "Gabon"),
    ("ST", "sao-tome-principe", "São Tomé and Príncipe"),
    ("AO", "angola", "Angola"),
    ("ZM", "zambia", "Zambia"),
    ("ZW", "zimbabwe", "Zimbabwe"),
    ("BW", "botswana", "Botswana"),
    ("NA", "namibia", "Namibia"),
    ("ZA", "south-africa", "South Africa"),
    ("LS", "lesotho", "Lesotho"),
    ("SZ", "eswatini", "Eswatini"),
    ("MG", "madagascar", "Madagascar"),
    ("MU", "mauritius", "Mauritius"),
    ("SC", "seychelles", "Seychelles"),
    ("KM", "comoros", "Comoros"),
    ("YT", "mayotte", "Mayotte"),
    ("RE", "reunion", "Réunion"),
    ("MZ", "mozambique", "Mozambique"),
    ("MW", "malawi", "Malawi"),
    ("GH", "ghana", "Ghana"),
    ("TG", "togo", "Togo"),
    ("BJ", "benin", "Benin"),
    ("NE", "niger", "Niger"),
    ("BF", "burkina-faso", "Burkina Faso"),
    ("ML", "mali", "Mali"),
    ("SN", "senegal", "Senegal"),
    ("GM", "gambia", "Gambia"),
    ("GW", "guinea-bissau", "Guinea-Bissau"),
    ("GN", "guinea", "Guinea"),
    ("SL", "sierra-leone", "Sierra Leone"),
    ("LR", "liberia", "Liberia"),
    ("CI", "ivory-coast", "Ivory Coast"),
    ("MR", "mauritania", "Mauritania"),
    ("CV", "cape-verde", "Cape Verde"),
    ("EH", "western-sahara", "Western Sahara"),
)

COUNTRY_TO_REGION: Mapping[str, str] = MappingProxyType(
    {code: region for code, region, _ in COUNTRY_CATALOG}
)


# ============================================================================
# Equivalences
# ============================================================================

@dataclass(frozen=True, slots=True)
class EquivalenceFactor:
    """kg CO2 emitted (or absorbed) per one unit of an everyday activity."""

    name: str
    kg_co2_per_unit: float
    decimals: Optional[int]  # None rounds to a whole number


EQUIVALENCE_FACTORS: Tuple[EquivalenceFactor, ...] = (
    EquivalenceFactor("car_miles", 0.411, 2),  # average car, 25 mpg
    EquivalenceFactor("flight_miles", 0.255, 2),  # domestic flight
    EquivalenceFactor("beef_burgers", 3.4, 2),
    EquivalenceFactor("smartphone_charges", 0.0001, None),
    EquivalenceFactor("household_electricity_days", 20.5, 2),  # average US household
    EquivalenceFactor("tree_years", 22.0, 2),  # absorbed per tree per year
    EquivalenceFactor("laptop_hours", 0.05, 2),
    EquivalenceFactor("lightbulb_hours", 0.0004, None),  # LED bulb
)


# ============================================================================
# Lookups
# ============================================================================

def get_energy_per_token(model: Optional[str]) -> float:
    """
    kWh per token for a model.

    Unknown or empty model names use the default constant; model choice never
    blocks a calculation.
    """
    key = (model or "").strip().lower()
    return ENERGY_PER_TOKEN_KWH.get(key, ENERGY_PER_TOKEN_KWH[DEFAULT_MODEL_KEY])


def normalize_static_region(region: Optional[str]) -> str:
    """
    Resolve a region key to a key of the static CO2 factor table.

    Accepts named static regions (case-insensitive) and the country-code
    aliases; anything else maps to global-average.
    """
    raw = (region or "").strip()
    named = raw.lower()
    if named in STATIC_CO2_FACTORS_KG_PER_KWH:
        return named
    return STATIC_REGION_ALIASES.get(raw.upper(), GLOBAL_AVERAGE)


def get_static_co2_factor(region: Optional[str]) -> float:
    """Static kg CO2/kWh for a region, defaulting to global-average."""
    return STATIC_CO2_FACTORS_KG_PER_KWH[normalize_static_region(region)]


def map_country_code_to_region(country_code: str) -> str:
    """
    Map an ISO country code to its named region.

    Unknown codes map to global-average.
    """
    return COUNTRY_TO_REGION.get(country_code.strip().upper(), GLOBAL_AVERAGE)


def get_fallback_intensity(country_code: str) -> Tuple[str, float]:
    """
    Named region and average gCO2/kWh for a country code.

    Always returns a value: regions without an entry use global-average.
    """
    region = map_country_code_to_region(country_code)
    intensity = FALLBACK_INTENSITY_G_PER_KWH.get(region)
    if intensity is None:
        intensity = FALLBACK_INTENSITY_G_PER_KWH[GLOBAL_AVERAGE]
    return region, intensity


def get_live_region_catalog() -> Dict[str, Dict[str, str]]:
    """
    Named regions available for carbon-intensity lookup.

    Returns:
        {"global-average": {"name": "Global Average", "code": "GLOBAL"},
         "united-states": {"name": "United States", "code": "US"}, ...}
    """
    catalog: Dict[str, Dict[str, str]] = {
        GLOBAL_AVERAGE: {"name": "Global Average", "code": "GLOBAL"},
    }
    for code, region, name in COUNTRY_CATALOG:
        catalog[region] = {"name": name, "code": code}
    return catalog


def get_all_static_regions() -> List[str]:
    return list(STATIC_CO2_FACTORS_KG_PER_KWH.keys())


def verify_static_tables() -> None:
    """
    Check the invariants the lookups rely on.

    Raises:
        ConfigurationError: If a default entry is missing or a factor is not positive.
    """
    if GLOBAL_AVERAGE not in FALLBACK_INTENSITY_G_PER_KWH:
        raise ConfigurationError("Fallback intensity table has no global-average entry")
    if GLOBAL_AVERAGE not in STATIC_CO2_FACTORS_KG_PER_KWH:
        raise ConfigurationError("Static CO2 factor table has no global-average entry")
    if DEFAULT_MODEL_KEY not in ENERGY_PER_TOKEN_KWH:
        raise ConfigurationError("Energy table has no default model entry")

    for table_name, table in (
        ("fallback intensity", FALLBACK_INTENSITY_G_PER_KWH),
        ("static CO2 factor", STATIC_CO2_FACTORS_KG_PER_KWH),
    ):
        bad = [key for key, value in table.items() if value <= 0]
        if bad:
            raise ConfigurationError(f"Non-positive {table_name} entries: {bad}")

    bad_models = [key for key, value in ENERGY_PER_TOKEN_KWH.items() if value < 0]
    if bad_models:
        raise ConfigurationError(f"Negative energy-per-token entries: {bad_models}")


verify_static_tables()


__all__ = [
    "COUNTRY_CATALOG",
    "DEFAULT_MODEL_KEY",
    "ENERGY_PER_TOKEN_KWH",
    "EQUIVALENCE_FACTORS",
    "EquivalenceFactor",
    "FALLBACK_INTENSITY_G_PER_KWH",
    "GLOBAL_AVERAGE",
    "MODEL_DISPLAY_NAMES",
    "RENEWABLE",
    "STATIC_CO2_FACTORS_KG_PER_KWH",
    "STATIC_ONLY_REGIONS",
    "STATIC_REGION_DISPLAY_NAMES",
    "get_all_static_regions",
    "get_energy_per_token",
    "get_fallback_intensity",
    "get_live_region_catalog",
    "get_static_co2_factor",
    "map_country_code_to_region",
    "normalize_static_region",
    "verify_static_tables",
]
