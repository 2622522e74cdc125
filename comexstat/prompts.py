# =============================================================================
# comexstat/prompts.py - Prompt Templates
# =============================================================================
#
# Text the MCP server offers as ready-made prompts.  Kept apart from the
# tool wiring so the wording can be read and tested on its own.
# =============================================================================

from typing import Optional


def build_export_data_prompt(
    period_from: str,
    period_to: str,
    product: Optional[str] = None,
    country: Optional[str] = None,
) -> str:
    """Guidance for querying Brazilian exports over a month range.

    Args:
        period_from: First month, "YYYY-MM".
        period_to: Last month, "YYYY-MM".
        product: Optional product of interest (free text, e.g. "Coffee").
        country: Optional destination country (free text, e.g. "USA").
    """
    lines = [f"Query Brazilian export data for period from {period_from} to {period_to}"]
    if product:
        lines.append(f"focusing on product: {product}")
    if country:
        lines.append(f"for exports to: {country}")

    steps = [
        "Use the queryData tool with flow='export' and "
        f"period={{from: '{period_from}', to: '{period_to}'}}.",
    ]
    if country:
        steps.append(
            "Look up the country code with getCountries first and pass it as a "
            "'country' filter. The Brazil code is not needed."
        )
    if product:
        steps.append(
            "Find the matching classification code with getFilterValues "
            "(e.g. filter 'ncm' or 'section') and pass it as a filter."
        )
    steps.append(
        "Request metrics such as metricFOB and metricKG and pick details that "
        "answer the question (e.g. country, ncm)."
    )

    return "\n".join(lines) + "\n\n" + "\n".join(f"- {step}" for step in steps)
