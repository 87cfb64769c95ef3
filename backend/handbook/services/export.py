import csv
import io
from datetime import datetime
from typing import List, Optional

from ..core.content import ContentCache, ContentNode, POLICY_CARD
from ..utils.text import strip_html

EXPORT_FILENAME = "policies-export.csv"

EXPORT_COLUMNS = [
    "Id",
    "Title",
    "Category",
    "Subcategory",
    "Slug",
    "SummaryText",
    "FullHtml",
    "EffectiveDate",
    "Version",
    "AppliesToStates",
    "StateOverridesJson",
    "Tags",
    "RelatedIds",
    "AttachmentsJson",
    "AckRequired",
    "ExternalId",
]


def format_effective_date(value: Optional[str]) -> str:
    """ISO-8601 round-trip form of a stored date, or empty"""
    if not value:
        return ""
    value = value.strip()
    # fromisoformat only accepts a trailing Z from Python 3.11
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(value).isoformat()
    except ValueError:
        return ""


def policy_row(node: ContentNode) -> List[str]:
    parent = node.parent()
    return [
        str(node.id),
        node.field("policyTitle") or node.name,
        parent.name if parent is not None else "",
        "",  # Subcategory
        node.url(),
        strip_html(node.field("summary")),
        node.field("fullPolicyText") or "",
        format_effective_date(node.field("revisionDate")),
        "",  # Version
        "",  # AppliesToStates
        "",  # StateOverridesJson
        "",  # Tags
        "",  # RelatedIds
        "",  # AttachmentsJson
        "",  # AckRequired
        "",  # ExternalId
    ]


def export_policies_csv(cache: Optional[ContentCache]) -> bytes:
    """
    Export every policy card as CSV.

    Only identity, title, category, slug, summary, body and effective date
    are filled in; the other columns are placeholders kept for the import
    format and are always empty.
    """
    buffer = io.StringIO()
    # QUOTE_MINIMAL: quote only fields with a comma, quote or line break
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\r\n")
    writer.writerow(EXPORT_COLUMNS)

    if cache is not None:
        for node in cache.all_content():
            if node.kind() == POLICY_CARD:
                writer.writerow(policy_row(node))

    return buffer.getvalue().encode("utf-8")
