"""
Report document model and HTML rendering.

A Tutorial is an ordered list of Sections. Each section holds prose,
an optional code listing, an optional preformatted block (a model
summary), tables and figures. render_html() turns it into one
self-contained HTML page: tables via DataFrame.to_html, figures inlined
as base64 PNGs, no external assets.
"""

from __future__ import annotations

import html
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import pandas as pd
from matplotlib.figure import Figure

from olsbench.core.compute.environment import EnvironmentInfo
from olsbench.report.plotting import figure_to_base64


@dataclass(frozen=True)
class Table:
    """A captioned DataFrame."""
    frame: pd.DataFrame
    caption: str = ""
    float_format: str = "{:.4g}"


@dataclass(frozen=True)
class Image:
    """A captioned PNG, already base64 encoded."""
    png_base64: str
    caption: str = ""

    @classmethod
    def from_figure(cls, fig: Figure, caption: str = "") -> Image:
        return cls(png_base64=figure_to_base64(fig), caption=caption)


@dataclass
class Section:
    """One cell of the narrative."""
    title: str
    paragraphs: list[str] = field(default_factory=list)
    code: str | None = None
    preformatted: str | None = None
    tables: list[Table] = field(default_factory=list)
    images: list[Image] = field(default_factory=list)


@dataclass
class Tutorial:
    """The whole narrative plus the context it ran in."""
    title: str
    sections: list[Section]
    environment: EnvironmentInfo
    parameters: dict[str, Any] = field(default_factory=dict)
    created: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def section(self, title: str) -> Section:
        """
        Look up a section by title.

        Raises:
            KeyError: If no section has that title
        """
        for sec in self.sections:
            if sec.title == title:
                return sec
        raise KeyError(
            f"No section titled {title!r}. Available: {[s.title for s in self.sections]}"
        )


_CSS = """
body { font-family: -apple-system, "Segoe UI", Helvetica, Arial, sans-serif;
       max-width: 60rem; margin: 2rem auto; padding: 0 1rem; color: #222; line-height: 1.5; }
h1 { border-bottom: 2px solid #444; padding-bottom: .3rem; }
h2 { margin-top: 2.5rem; border-bottom: 1px solid #ccc; }
pre { background: #f6f8fa; padding: .8rem; overflow-x: auto; border-radius: 4px; }
table.dataframe { border-collapse: collapse; margin: 1rem 0; font-size: .9rem; }
table.dataframe th, table.dataframe td { border: 1px solid #ddd; padding: .3rem .6rem; text-align: right; }
table.dataframe th { background: #f0f0f0; }
figure { margin: 1rem 0; }
figcaption, caption { color: #555; font-size: .9rem; }
.meta { color: #555; font-size: .9rem; }
"""


def _render_table(table: Table) -> str:
    body = table.frame.to_html(
        index=False,
        border=0,
        float_format=table.float_format.format,
        na_rep='NA',
    )
    caption = f'<p class="meta">{html.escape(table.caption)}</p>' if table.caption else ""
    return f"{caption}\n{body}"


def _render_image(image: Image) -> str:
    caption = f"<figcaption>{html.escape(image.caption)}</figcaption>" if image.caption else ""
    alt = html.escape(image.caption or "benchmark plot", quote=True)
    return (
        f'<figure><img src="data:image/png;base64,{image.png_base64}" alt="{alt}">'
        f"{caption}</figure>"
    )


def _render_section(index: int, section: Section) -> str:
    parts = [f'<section id="s{index}">', f"<h2>{index}. {html.escape(section.title)}</h2>"]
    parts.extend(f"<p>{html.escape(p)}</p>" for p in section.paragraphs)
    if section.code:
        parts.append(f'<pre><code class="language-python">{html.escape(section.code)}</code></pre>')
    if section.preformatted:
        parts.append(f"<pre>{html.escape(section.preformatted)}</pre>")
    parts.extend(_render_table(t) for t in section.tables)
    parts.extend(_render_image(i) for i in section.images)
    parts.append("</section>")
    return "\n".join(parts)


def render_html(tutorial: Tutorial) -> str:
    """Render the tutorial as a self-contained HTML document."""
    env = pd.DataFrame(tutorial.environment.as_rows(), columns=['component', 'version'])
    params = pd.DataFrame(
        [(k, str(v)) for k, v in tutorial.parameters.items()],
        columns=['parameter', 'value'],
    )
    header = [
        f"<h1>{html.escape(tutorial.title)}</h1>",
        f'<p class="meta">Generated {tutorial.created:%Y-%m-%d %H:%M:%S %Z}</p>',
        _render_table(Table(env, caption="Environment")),
    ]
    if not params.empty:
        header.append(_render_table(Table(params, caption="Parameters")))

    body = [_render_section(i, s) for i, s in enumerate(tutorial.sections, start=1)]

    return "\n".join([
        "<!DOCTYPE html>",
        '<html lang="en">',
        "<head>",
        '<meta charset="utf-8">',
        f"<title>{html.escape(tutorial.title)}</title>",
        f"<style>{_CSS}</style>",
        "</head>",
        "<body>",
        *header,
        *body,
        "</body>",
        "</html>",
    ])


def write_report(tutorial: Tutorial, path: str | Path) -> Path:
    """Render and write the report (UTF-8). Returns the path written."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_html(tutorial), encoding='utf-8')
    return path
