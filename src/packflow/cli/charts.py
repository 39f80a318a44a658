"""Terminal and SVG rendering of revenue series."""

from typing import Sequence
from xml.sax.saxutils import escape

from packflow.domain.entities import BucketPoint
from packflow.domain.revenue import DEFAULT_CHART_PADDING, layout_chart_points

BAR_CHAR = "█"


def render_text_chart(series: Sequence[BucketPoint], width: int = 40) -> list[str]:
    """Render one horizontal bar per bucket."""
    if not series:
        return []
    max_revenue = max(max(point.revenue for point in series), 1)
    label_width = max(len(point.label) for point in series)

    lines = []
    for point in series:
        bar = BAR_CHAR * int(round(float(point.revenue / max_revenue) * width))
        lines.append(f"{point.label:<{label_width}} {bar:<{width}} ${point.revenue:>10,.2f}")
    return lines


def render_svg_chart(
    series: Sequence[BucketPoint], width: int = 800, height: int = 400
) -> str:
    """Render the series as a standalone SVG line chart."""
    padding = DEFAULT_CHART_PADDING
    points = layout_chart_points(series, width=width, height=height)
    baseline = height - padding["bottom"]

    parts = [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" '
        'class="revenue-svg-chart">',
        f'<line x1="{padding["left"]}" y1="{baseline}" x2="{width - padding["right"]}" '
        f'y2="{baseline}" stroke="#e0e0e0" stroke-width="1" />',
    ]
    if points:
        coords = " ".join(f"{p.x:.1f},{p.y:.1f}" for p in points)
        parts.append(
            f'<polyline points="{coords}" fill="none" stroke="#667eea" stroke-width="2" />'
        )
    for p in points:
        tooltip = escape(f"{p.label}: ${p.revenue:,.2f}", {'"': "&quot;"})
        parts.append(
            f'<circle cx="{p.x:.1f}" cy="{p.y:.1f}" r="4" fill="#667eea">'
            f"<title>{tooltip}</title></circle>"
        )
        parts.append(
            f'<text x="{p.x:.1f}" y="{baseline + 20}" text-anchor="middle" '
            f'font-size="11" fill="#666">{escape(p.label)}</text>'
        )
    parts.append("</svg>")
    return "\n".join(parts)
