"""CRA-style rental expense buckets.

The ledger stores a controlled tax-category name on each expense. Reports
resolve that name to one of the canonical buckets below with an exact,
case-sensitive lookup. Anything unknown, including a missing category,
lands in "Other Expenses".
"""

from types import MappingProxyType

OTHER_EXPENSES = "Other Expenses"

TAX_BUCKETS: tuple[str, ...] = (
    "Advertising",
    "Insurance",
    "Interest & Bank Charges",
    "Repairs & Maintenance",
    "Management & Administration Fees",
    "Motor Vehicle Expenses",
    "Office Expenses",
    "Professional Fees",
    "Property Taxes",
    "Salaries Wages Benefits",
    "Travel",
    "Utilities",
    OTHER_EXPENSES,
)

# Ledger display name -> canonical bucket. Canonical names map to themselves.
_TAX_CATEGORY_MAP: MappingProxyType[str, str] = MappingProxyType(
    {
        "Advertising": "Advertising",
        "Insurance": "Insurance",
        "Interest & Bank Charges": "Interest & Bank Charges",
        "Maintenance & Repairs": "Repairs & Maintenance",
        "Repairs & Maintenance": "Repairs & Maintenance",
        "Management & Administration Fees": "Management & Administration Fees",
        "Motor Vehicle": "Motor Vehicle Expenses",
        "Motor Vehicle Expenses": "Motor Vehicle Expenses",
        "Office Expenses": "Office Expenses",
        "Professional Fees": "Professional Fees",
        "Property Taxes": "Property Taxes",
        "Salaries, Wages & Benefits": "Salaries Wages Benefits",
        "Salaries Wages Benefits": "Salaries Wages Benefits",
        "Travel": "Travel",
        "Utilities": "Utilities",
        OTHER_EXPENSES: OTHER_EXPENSES,
    }
)

# Keyword -> ledger tax-category name, checked in order.
TAX_KEYWORD_RULES: tuple[tuple[str, str], ...] = (
    ("property tax", "Property Taxes"),
    ("insurance", "Insurance"),
    ("mortgage", "Interest & Bank Charges"),
    ("interest", "Interest & Bank Charges"),
    ("bank fee", "Interest & Bank Charges"),
    ("maintenance", "Maintenance & Repairs"),
    ("repair", "Maintenance & Repairs"),
    ("management", "Management & Administration Fees"),
    ("admin", "Management & Administration Fees"),
    ("tax", "Property Taxes"),
    ("utility", "Utilities"),
    ("utilities", "Utilities"),
    ("electric", "Utilities"),
    ("water", "Utilities"),
    ("gas", "Utilities"),
    ("legal", "Professional Fees"),
    ("accounting", "Professional Fees"),
    ("professional", "Professional Fees"),
    ("travel", "Travel"),
    ("office", "Office Expenses"),
    ("supply", "Office Expenses"),
    ("vehicle", "Motor Vehicle"),
    ("car", "Motor Vehicle"),
    ("advertising", "Advertising"),
    ("marketing", "Advertising"),
    ("salary", "Salaries, Wages & Benefits"),
    ("wage", "Salaries, Wages & Benefits"),
    ("employee", "Salaries, Wages & Benefits"),
)


def resolve_tax_bucket(category_name: str | None) -> str:
    """Map a ledger tax-category name to its canonical bucket."""
    if category_name is None:
        return OTHER_EXPENSES
    return _TAX_CATEGORY_MAP.get(category_name, OTHER_EXPENSES)


def suggest_tax_category(*texts: str | None) -> str:
    """Suggest a ledger tax-category name from free text.

    Used to pre-fill the category when an expense is entered without one.
    Matching is case-insensitive substring search; first rule wins.
    """
    haystack = " ".join(t.lower() for t in texts if t)
    for keyword, category in TAX_KEYWORD_RULES:
        if keyword in haystack:
            return category
    return OTHER_EXPENSES
