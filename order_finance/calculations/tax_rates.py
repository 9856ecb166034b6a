"""Material company tax rate lookup.

The rate table maps a lower-cased company name to a decimal rate and is
supplied by the caller (loaded from the material companies reference data).
A ``default`` key, when present, replaces the built-in fallback rate.
"""

import logging
from typing import Dict, Mapping, Optional

from ..constants import DEFAULT_MATERIAL_TAX_RATE
from ..utils.numbers import to_number_or_default

logger = logging.getLogger(__name__)

DEFAULT_KEY = 'default'

TaxRateTable = Mapping[str, float]


def material_company_tax_rate(company_name: Optional[str], tax_rates: Optional[TaxRateTable] = None) -> float:
    """Get the internal tax rate for a material company.

    Matching order: exact name, then a substring match in either direction
    ("charlotte" matches "charlotte fabrics" and vice versa), then the
    table's ``default`` entry, then 13%.

    Args:
        company_name: Material company as typed on the furniture group
        tax_rates: Company name to decimal rate table

    Returns:
        float: Tax rate as a decimal (0.13 for 13%)
    """
    if not company_name or not isinstance(company_name, str) or not company_name.strip():
        return DEFAULT_MATERIAL_TAX_RATE

    tax_rates = tax_rates or {}
    normalized = company_name.lower().strip()

    if normalized in tax_rates:
        return tax_rates[normalized]

    for company, rate in tax_rates.items():
        if company == DEFAULT_KEY:
            continue
        if company in normalized or normalized in company:
            return rate

    return tax_rates.get(DEFAULT_KEY, DEFAULT_MATERIAL_TAX_RATE)


def build_tax_rate_table(companies, default_rate: float = DEFAULT_MATERIAL_TAX_RATE) -> Dict[str, float]:
    """Build a rate table from material company records.

    Args:
        companies: Iterable of (name, tax rate in percent) pairs
        default_rate: Decimal rate used when a company has no usable rate

    Returns:
        Dict mapping lower-cased company name to decimal rate
    """
    table = {}
    default_percent = default_rate * 100
    for name, percent in companies:
        if not name or not str(name).strip():
            continue
        rate = to_number_or_default(percent, 0.0) or default_percent
        table[str(name).lower().strip()] = rate / 100
    if default_rate != DEFAULT_MATERIAL_TAX_RATE:
        table.setdefault(DEFAULT_KEY, default_rate)
    logger.debug(f"Loaded tax rates for {len(table)} material companies")
    return table
