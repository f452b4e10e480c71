"""Presentation helpers for rupee amounts and percentages."""


def format_inr(amount: float | int | None) -> str:
    """
    Format an amount as rupees with thousands separators.

    Whole amounts drop the paise: 150000 → "₹150,000", 99.5 → "₹99.50".
    """
    value = float(amount or 0)
    if value.is_integer():
        return f"₹{int(value):,}"
    return f"₹{value:,.2f}"


def percentage(part: int | float, whole: int | float) -> float:
    """part/whole as a percentage with one decimal, 0.0 when whole is 0."""
    if not whole:
        return 0.0
    return round(part / whole * 100, 1)
