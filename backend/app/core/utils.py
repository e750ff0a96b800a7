"""
Utility functions for the application.
"""


def normalize_email(email: str) -> str:
    """Normalize an email address (lowercased, surrounding blanks removed)."""
    return email.strip().lower()


def normalize_name(name: str) -> str:
    """Normalized form of a trip name, used for lookups."""
    return name.strip().lower()


def format_cents(cents: int) -> str:
    """Render an amount in cents as a decimal string, e.g. 1505 -> '15.05'."""
    sign = "-" if cents < 0 else ""
    whole, frac = divmod(abs(cents), 100)
    return f"{sign}{whole}.{frac:02d}"

