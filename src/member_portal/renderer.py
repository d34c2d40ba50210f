from __future__ import annotations

import html
from collections.abc import Iterable

from .models import VACANT_GIVEN_NAME, OfficeHolder, PageLink

PAGE_TITLE = "Member Portal"
CRITICAL_ERROR_TEXT = "Critical error: the office directory could not be loaded."

_STYLE = (
    "body{font-family:sans-serif;margin:2rem;color:#222}"
    "table{border-collapse:collapse}"
    "th,td{border-bottom:1px solid #ddd;padding:4px 10px;text-align:left}"
    ".vacant{color:#888;font-style:italic}"
    ".critical-error{background:#b00020;color:#fff;padding:6px 10px}"
)


def _esc(text: str) -> str:
    return html.escape(text, quote=True)


def _render_links(heading: str, links: Iterable[PageLink]) -> str:
    items = "\n".join(
        f'    <li><a href="{_esc(link.url)}">{_esc(link.title)}</a></li>' for link in links
    )
    return f"<section>\n  <h2>{_esc(heading)}</h2>\n  <ul>\n{items}\n  </ul>\n</section>"


def _render_holder_row(holder: OfficeHolder) -> str:
    if holder.is_vacant:
        return (
            f'    <tr class="vacant"><td>{_esc(holder.office_title)}</td>'
            f'<td colspan="4">{VACANT_GIVEN_NAME}</td>'
            f"<td>{_esc(holder.reelection_label)}</td></tr>"
        )
    mail = (
        f'<a href="mailto:{_esc(holder.email)}">{_esc(holder.email)}</a>' if holder.email else ""
    )
    return (
        f"    <tr><td>{_esc(holder.office_title)}</td>"
        f"<td>{_esc(holder.given_name)}</td>"
        f"<td>{_esc(holder.surname)}</td>"
        f"<td>{_esc(holder.nickname)}</td>"
        f"<td>{mail}</td>"
        f"<td>{_esc(holder.reelection_label)}</td></tr>"
    )


def render_directory(directory: Iterable[OfficeHolder]) -> str:
    rows = "\n".join(_render_holder_row(h) for h in directory)
    return (
        "<section>\n  <h2>Office Holders</h2>\n  <table>\n"
        "    <tr><th>Office</th><th>Given name</th><th>Surname</th>"
        "<th>Nickname</th><th>E-mail</th><th>Re-election</th></tr>\n"
        f"{rows}\n  </table>\n</section>"
    )


def render_error_banner() -> str:
    return f'<section>\n  <p class="critical-error">{CRITICAL_ERROR_TEXT}</p>\n</section>'


def render_page(
    directory: Iterable[OfficeHolder] | None,
    *,
    member_links: Iterable[PageLink],
    external_links: Iterable[PageLink],
    error: bool = False,
) -> str:
    """Render the full portal page.

    With ``error=True`` (or no directory) the office table is replaced by a
    one-line critical-error banner.  The link lists render either way.
    """
    if error or directory is None:
        body = render_error_banner()
    else:
        body = render_directory(directory)
    return "\n".join(
        [
            "<!DOCTYPE html>",
            '<html lang="de">',
            "<head>",
            '<meta charset="utf-8">',
            f"<title>{PAGE_TITLE}</title>",
            f"<style>{_STYLE}</style>",
            "</head>",
            "<body>",
            f"<h1>{PAGE_TITLE}</h1>",
            body,
            _render_links("Members", member_links),
            _render_links("Links", external_links),
            "</body>",
            "</html>",
            "",
        ]
    )
