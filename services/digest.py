"""
Notification batching - groups expiring products into a readable digest.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime
from html import escape
from typing import Iterable, List, Optional, Tuple, Union
from uuid import UUID

from services.expiry import days_until_expiry

DIGEST_SUBJECT = "Product Expiration Alert"
DEFAULT_DATE_FORMAT = "%Y-%m-%d"


@dataclass(frozen=True)
class DigestEntry:
    product_id: Optional[UUID]
    name: str
    expiry: date


@dataclass(frozen=True)
class DigestSection:
    """All products sharing the same number of days left"""

    days: int
    entries: Tuple[DigestEntry, ...]

    @property
    def heading(self) -> str:
        return f"Expiring in {self.days} day{'' if self.days == 1 else 's'}"


@dataclass(frozen=True)
class Digest:
    """One notification's worth of expiring products, sections ascending by days left"""

    sections: Tuple[DigestSection, ...]
    date_format: str = DEFAULT_DATE_FORMAT
    subject: str = field(default=DIGEST_SUBJECT)

    @property
    def product_ids(self) -> List[UUID]:
        return [
            entry.product_id
            for section in self.sections
            for entry in section.entries
            if entry.product_id is not None
        ]

    @property
    def product_count(self) -> int:
        return sum(len(section.entries) for section in self.sections)

    def format_date(self, value: date) -> str:
        return value.strftime(self.date_format)

    def render_text(self) -> str:
        lines = [self.subject, "", "The following products are expiring soon:"]
        for section in self.sections:
            lines.append("")
            lines.append(f"{section.heading}:")
            for entry in section.entries:
                lines.append(
                    f"  - {entry.name} (expires on {self.format_date(entry.expiry)})"
                )
        return "\n".join(lines) + "\n"

    def render_html(self) -> str:
        parts = [
            f"<h1>{escape(self.subject)}</h1>",
            "<p>The following products are expiring soon:</p>",
        ]
        for section in self.sections:
            parts.append(f"<h3>{escape(section.heading)}:</h3>")
            parts.append("<ul>")
            for entry in section.entries:
                parts.append(
                    f"<li><strong>{escape(entry.name)}</strong> - "
                    f"Expires on {escape(self.format_date(entry.expiry))}</li>"
                )
            parts.append("</ul>")
        return "".join(parts)


def build_digest(
    products: Iterable,
    now: Union[date, datetime],
    date_format: str = DEFAULT_DATE_FORMAT,
) -> Optional[Digest]:
    """
    Group products by days left and build a digest.

    Sections are ordered by ascending day count; entries inside a section keep
    the order they were given in. Returns None for an empty input so callers
    can skip sending altogether.
    """
    grouped = defaultdict(list)
    for product in products:
        days = days_until_expiry(product.expiry, now)
        grouped[days].append(
            DigestEntry(
                product_id=getattr(product, "product_id", None),
                name=product.name,
                expiry=product.expiry,
            )
        )

    if not grouped:
        return None

    sections = tuple(
        DigestSection(days=days, entries=tuple(grouped[days]))
        for days in sorted(grouped)
    )
    return Digest(sections=sections, date_format=date_format)
