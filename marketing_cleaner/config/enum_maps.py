"""Lookup tables for standardizing categorical and free-text values.

The category rules are evaluated top to bottom; the first predicate that
matches wins. Values no rule claims are title-cased.
"""

# Cell contents treated as "no value" in keys, numbers, dates and categories
# (compared case-insensitively after trim)
MISSING_TOKENS = {"", "null", "none", "n/a", "na", "nan", "-", "--"}

# Descriptive text ("NA" may be a campaign name) is only null when blank
TEXT_MISSING_TOKENS = {""}

# Closed-world boolean vocabulary: anything else is False
TRUTHY_VALUES = {"TRUE", "YES", "1", "T", "Y"}

# (kind, pattern, canonical). Patterns are matched against the upper-cased,
# trimmed value with underscores replaced by spaces.
PLATFORM_RULES = [
    ("contains", "GOOGLE", "Google Ads"),
    ("in", ("FACEBOOK", "FB"), "Facebook"),
    ("equals", "INSTAGRAM", "Instagram"),
    ("equals", "LINKEDIN", "LinkedIn"),
]

REFERRAL_SOURCE_RULES = [
    ("missing", None, "Unknown"),
    ("equals", "UNKNOWN", "Unknown"),
    ("equals", "EMAIL", "Email"),
    ("regex", r"PAID.*SEARCH", "Paid Search"),
    ("equals", "SOCIAL", "Social"),
    ("equals", "ORGANIC", "Organic"),
    ("equals", "DIRECT", "Direct"),
]

# Recognized textual date layouts, keyed by strptime format
DATE_PATTERNS = {
    "%Y-%m-%d": r"^\d{4}-\d{2}-\d{2}$",
    "%m/%d/%Y": r"^\d{2}/\d{2}/\d{4}$",
    "%m-%d-%Y": r"^\d{2}-\d{2}-\d{4}$",
    "%d-%m-%Y": r"^\d{2}-\d{2}-\d{4}$",
}

CAMPAIGN_DATE_FORMATS = ("%Y-%m-%d", "%m/%d/%Y", "%d-%m-%Y")
AD_DATE_FORMATS = ("%Y-%m-%d", "%m-%d-%Y")
DEFAULT_DATE_FORMATS = ("%Y-%m-%d", "%m/%d/%Y", "%m-%d-%Y")

# Inclusive lower bounds; the last bucket is open-ended
AGE_GROUPS = [
    (18, 24, "18-24"),
    (25, 34, "25-34"),
    (35, 44, "35-44"),
    (45, 54, "45-54"),
    (55, 64, "55-64"),
    (65, None, "65+"),
]
UNKNOWN_AGE_GROUP = "Unknown"

VALID_AGE_RANGE = (18, 100)
