"""Server-rendered HTML pages with JSON-LD structured data."""

from __future__ import annotations

from datetime import date
import json
from typing import Any, Mapping, Optional, Sequence
from zoneinfo import ZoneInfo

from jinja2 import Environment, StrictUndefined, TemplateSyntaxError
from loguru import logger

from .dates import try_parse_instant
from .timezones import CALENDAR_TIMEZONE, MONTH_NAMES, WEEKDAY_ABBR, format_time_et


BASE_STYLE = """\
body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; line-height: 1.6; margin: 0; padding: 20px; background-color: #f8fafc; }
.container { max-width: 1200px; margin: 0 auto; background: white; border-radius: 8px; box-shadow: 0 1px 3px rgba(0,0,0,0.1); overflow: hidden; }
h1 { margin: 0; padding: 20px; background: #1e293b; color: white; font-size: 1.5rem; }
h2 { margin: 20px 0 15px 0; padding: 0 20px; color: #374151; font-size: 1.25rem; }
nav { padding: 15px 20px; background: #f1f5f9; border-bottom: 1px solid #e2e8f0; }
nav a { color: #3b82f6; text-decoration: none; margin: 0 10px; }
table { width: 100%; border-collapse: collapse; }
th { background: #f8fafc; padding: 12px; text-align: left; font-weight: 600; color: #374151; border-bottom: 2px solid #e5e7eb; }
td { padding: 8px 12px; border-bottom: 1px solid #f3f4f6; }
.importance-high { color: #dc2626; font-weight: 600; }
.importance-medium { color: #f59e0b; font-weight: 500; }
.importance-low { color: #10b981; }
.events-count { padding: 15px 20px; color: #6b7280; font-size: 0.9rem; }
.footer { padding: 20px; text-align: center; color: #6b7280; font-size: 0.85rem; border-top: 1px solid #f3f4f6; }
"""

TEMPLATES: dict[str, str] = {
    "week": """\
<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8"/>
  <meta name="viewport" content="width=device-width, initial-scale=1"/>
  <title>Economic Calendar - Week of {{ week_start_label }}</title>
  <link rel="canonical" href="{{ canonical }}"/>
  <link rel="prev" href="{{ prev_link }}"/>
  <link rel="next" href="{{ next_link }}"/>
  <meta name="description" content="Weekly economic calendar for {{ week_start_label }} to {{ week_end_label }}. Track major economic events, market announcements, and financial indicators."/>
  <meta property="og:title" content="Economic Calendar - Week of {{ week_start_label }}"/>
  <meta property="og:description" content="Weekly economic calendar with {{ rows|length }} events for market analysis and trading insights."/>
  <meta property="og:type" content="website"/>
  <meta property="og:url" content="{{ canonical }}"/>
  <script type="application/ld+json">{{ json_ld|safe }}</script>
  <style>{{ style|safe }}</style>
</head>
<body>
  <div class="container">
    <h1>Economic Calendar - Week of {{ week_start_label }}</h1>
    <nav>
      <a href="{{ prev_link }}">&larr; Previous week</a>
      <span>|</span>
      <a href="/calendar/week">Current week</a>
      <span>|</span>
      <a href="{{ next_link }}">Next week &rarr;</a>
    </nav>
    <div class="events-count">
      {{ rows|length }} economic events scheduled for {{ week_start_label }} to {{ week_end_label }}
    </div>
    <table>
      <thead>
        <tr><th>Day</th><th>Time (ET)</th><th>Event</th><th>Country</th><th>Importance</th><th>Source</th></tr>
      </thead>
      <tbody>
      {% for row in rows %}
        <tr>
          <td>{{ row.day }}</td>
          <td>{{ row.time }} ET</td>
          <td>{{ row.event }}</td>
          <td>{{ row.country }}</td>
          <td><span class="importance-{{ row.importance|lower }}">{{ row.importance }}</span></td>
          <td><a href="{{ row.source_url }}" target="_blank" rel="noopener noreferrer">{{ row.source_name }}</a></td>
        </tr>
      {% else %}
        <tr><td colspan="6" style="text-align: center; padding: 40px; color: #6b7280;">No events scheduled for this week</td></tr>
      {% endfor %}
      </tbody>
    </table>
    <div class="footer">Economic Calendar powered by Market Squawk. Data updated every 10 minutes.</div>
  </div>
</body>
</html>
""",
    "today": """\
<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8"/>
  <meta name="viewport" content="width=device-width, initial-scale=1"/>
  <title>Market Briefing - {{ today_label }}</title>
  <link rel="canonical" href="{{ canonical }}"/>
  <meta name="description" content="Daily market briefing for {{ today_label }} with morning report and economic calendar. Track {{ rows|length }} scheduled events."/>
  <meta property="og:title" content="Market Briefing - {{ today_label }}"/>
  <meta property="og:description" content="Daily market briefing with {{ rows|length }} economic events and morning market analysis."/>
  <meta property="og:type" content="website"/>
  <meta property="og:url" content="{{ canonical }}"/>
  <script type="application/ld+json">{{ json_ld|safe }}</script>
  <style>{{ style|safe }}</style>
</head>
<body>
  <div class="container">
    <h1>Market Briefing - {{ today_label }}</h1>
    {% if summary %}
    <section class="morning-report">
      <h2>Morning Market Summary</h2>
      <p>{{ summary }}</p>
    </section>
    {% endif %}
    {% if commentary_url %}
    <div class="audio-briefing">
      <a href="{{ commentary_url }}" target="_blank" rel="noopener noreferrer">Listen to Morning Brief</a>
    </div>
    {% endif %}
    <section class="events-schedule">
      <h2>Today's Economic Calendar</h2>
      <div class="events-count">{{ rows|length }} economic events scheduled for today</div>
      {% if rows %}
      <table>
        <thead>
          <tr><th>Time (ET)</th><th>Event</th><th>Country</th><th>Importance</th><th>Source</th></tr>
        </thead>
        <tbody>
        {% for row in rows %}
          <tr>
            <td>{{ row.time }} ET</td>
            <td>{{ row.event }}</td>
            <td>{{ row.country }}</td>
            <td><span class="importance-{{ row.importance|lower }}">{{ row.importance }}</span></td>
            <td><a href="{{ row.source_url }}" target="_blank" rel="noopener noreferrer">{{ row.source_name }}</a></td>
          </tr>
        {% endfor %}
        </tbody>
      </table>
      {% else %}
      <div class="no-content">No economic events scheduled for today</div>
      {% endif %}
    </section>
    <nav class="navigation">
      <a href="/calendar/week">View Weekly Calendar</a>
      <span>|</span>
      <a href="/">Back to Market Squawk</a>
    </nav>
    <div class="footer">Market Briefing powered by Market Squawk. Data updated every 10 minutes.</div>
  </div>
</body>
</html>
""",
    "error": """\
<!doctype html>
<html>
<head>
  <title>Economic Calendar - Error</title>
  <meta name="viewport" content="width=device-width, initial-scale=1"/>
</head>
<body style="font-family: sans-serif; padding: 20px; text-align: center;">
  <h1>Economic Calendar Temporarily Unavailable</h1>
  <p>We're experiencing technical difficulties. Please try again in a few minutes.</p>
  <p><a href="{{ return_link }}">&larr; Return to current week</a></p>
</body>
</html>
""",
}

_env = Environment(undefined=StrictUndefined, autoescape=True)


def render(name: str, **context: Any) -> str:
    source = TEMPLATES.get(name)
    if source is None:
        raise ValueError(f"Template not found: {name}")
    try:
        return _env.from_string(source).render(style=BASE_STYLE, **context)
    except TemplateSyntaxError as exc:
        logger.error("Template syntax error in {}: {}", name, exc)
        raise ValueError(f"Template syntax error in {name}: {exc}") from exc


def long_date_label(day: date) -> str:
    return f"{MONTH_NAMES[day.month - 1]} {day.day}, {day.year}"


def dump_json_ld(payload: Mapping[str, Any]) -> str:
    # Keep "</script>" in event text from closing the tag early.
    return json.dumps(payload, indent=2).replace("</", "<\\/")


def _source(event: Mapping[str, Any]) -> Mapping[str, Any]:
    source = event.get("source")
    return source if isinstance(source, Mapping) else {}


def event_row(event: Mapping[str, Any]) -> dict[str, str]:
    instant = try_parse_instant(event.get("date"))
    day = ""
    if instant is not None:
        try:
            day = WEEKDAY_ABBR[instant.astimezone(ZoneInfo(CALENDAR_TIMEZONE)).weekday()]
        except OverflowError:
            day = ""
    source = _source(event)
    return {
        "day": day,
        "time": format_time_et(event.get("date")),
        "event": event.get("event") or "Unknown Event",
        "country": event.get("country") or "Unknown",
        "importance": event.get("importance") or "low",
        "source_name": source.get("name") or "Unknown",
        "source_url": source.get("url") or "#",
    }


def events_json_ld(
    events: Sequence[Mapping[str, Any]],
    *,
    name: str,
    description: str,
    page_url: str,
    default_keywords: str = "economic calendar, market events",
) -> dict[str, Any]:
    items = []
    for idx, event in enumerate(events):
        instant = try_parse_instant(event.get("date"))
        source = _source(event)
        tags = event.get("tags")
        items.append(
            {
                "@type": "ListItem",
                "position": idx + 1,
                "item": {
                    "@type": "Event",
                    "@id": f"{page_url}#event-{idx}",
                    "name": event.get("event") or "Economic Event",
                    "startDate": instant.isoformat().replace("+00:00", "Z") if instant else None,
                    "eventStatus": "https://schema.org/EventScheduled",
                    "eventAttendanceMode": "https://schema.org/OnlineEventAttendanceMode",
                    "location": {
                        "@type": "Place",
                        "name": event.get("country") or "Global",
                        "address": {
                            "@type": "PostalAddress",
                            "addressCountry": event.get("country") or "Global",
                        },
                    },
                    "organizer": {
                        "@type": "Organization",
                        "name": source.get("name") or "Economic Authority",
                        "url": source.get("url") or "",
                    },
                    "description": f"{event.get('importance') or 'Medium'} importance economic event",
                    "keywords": ", ".join(str(tag) for tag in tags) if tags else default_keywords,
                },
            }
        )
    return {
        "@context": "https://schema.org",
        "@type": "ItemList",
        "name": name,
        "description": description,
        "itemListElement": items,
    }


def render_week_page(
    *,
    events: Sequence[Mapping[str, Any]],
    from_date: date,
    to_date: date,
    canonical: str,
    prev_link: str,
    next_link: str,
) -> str:
    start_label = long_date_label(from_date)
    json_ld = events_json_ld(
        events,
        name=f"Economic Calendar - Week of {from_date.isoformat()}",
        description="Weekly economic calendar with market events and announcements",
        page_url=canonical,
    )
    return render(
        "week",
        rows=[event_row(event) for event in events],
        week_start_label=start_label,
        week_end_label=long_date_label(to_date),
        canonical=canonical,
        prev_link=prev_link,
        next_link=next_link,
        json_ld=dump_json_ld(json_ld),
    )


def render_today_page(
    *,
    events: Sequence[Mapping[str, Any]],
    today_label: str,
    canonical: str,
    summary: Optional[str] = None,
    commentary_url: Optional[str] = None,
) -> str:
    json_ld = events_json_ld(
        events,
        name=f"Market Briefing - {today_label}",
        description=f"Daily market briefing with economic calendar and morning report for {today_label}",
        page_url=canonical,
        default_keywords="economic calendar, market events, trading",
    )
    return render(
        "today",
        rows=[event_row(event) for event in events],
        today_label=today_label,
        canonical=canonical,
        summary=summary or "",
        commentary_url=commentary_url or "",
        json_ld=dump_json_ld(json_ld),
    )


def render_error_page() -> str:
    return render("error", return_link="/calendar/week")
