"""
Unit tests - export data prompt text.
"""
from comexstat.prompts import build_export_data_prompt


def test_full_prompt():
    text = build_export_data_prompt("2023-01", "2023-12", product="Coffee", country="USA")
    assert "Query Brazilian export data for period from 2023-01 to 2023-12" in text
    assert "focusing on product: Coffee" in text
    assert "for exports to: USA" in text
    assert "Use the queryData tool with flow='export'" in text
    assert "getCountries" in text


def test_prompt_without_optional_parts():
    text = build_export_data_prompt("2022-01", "2022-06")
    assert "focusing on product" not in text
    assert "for exports to" not in text
    assert "getCountries" not in text
    assert "Use the queryData tool with flow='export'" in text
