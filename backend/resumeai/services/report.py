from __future__ import annotations
from datetime import datetime, timezone
from html import escape
from typing import Iterable, Optional

from resumeai.core import AnalysisResult, JobDetails

IMPACT_COLORS = {"High": "#F43F5E", "Medium": "#F59E0B", "Low": "#3B82F6"}


def _e(s) -> str:
    return escape(str(s if s is not None else ""))


def _li(items: Iterable[str]) -> str:
    rows = "".join(f"<li>{_e(x)}</li>" for x in items)
    return rows or "<li class='muted'>—</li>"


def _tags(items: Iterable[str], cls: str) -> str:
    tags = "".join(f"<span class='tag {cls}'>{_e(x)}</span>" for x in items)
    return tags or "<span class='muted'>—</span>"


def _gauge(score: int) -> str:
    # semicircle; pathLength=100 lets the score be used directly as dash length
    return f"""
        <svg viewBox="0 0 200 110" class="gauge" role="img" aria-label="Overall score {score}%">
          <path d="M 20 100 A 80 80 0 0 1 180 100" pathLength="100" class="track"/>
          <path d="M 20 100 A 80 80 0 0 1 180 100" pathLength="100" class="value"
                stroke-dasharray="{score} 100"/>
          <text x="100" y="92" text-anchor="middle" class="gauge-label">{score}%</text>
        </svg>
    """


def render_dashboard(
    result: Optional[AnalysisResult],
    job_details: Optional[JobDetails] = None,
    filename: Optional[str] = None,
) -> str:
    if result is None:
        return ""

    now = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC")
    ja = result.job_alignment

    target = ""
    if job_details and job_details.title:
        target = _e(job_details.title)
        if job_details.company:
            target += f" at {_e(job_details.company)}"

    cards = ""
    for imp in result.improvements:
        color = IMPACT_COLORS.get(imp.impact, "#94A3B8")
        cards += f"""
        <div class="card">
          <span class="badge" style="color:{color}; border-color:{color};">{_e(imp.impact)} impact</span>
          <div class="title">{_e(imp.category)}</div>
          <div class="detail">{_e(imp.description)}</div>
        </div>
        """

    corrections = ""
    for err in result.spelling_errors:
        corrections += f"""
        <div class="card">
          <div><del class="orig">{_e(err.original)}</del> &rarr; <ins class="fix">{_e(err.suggestion)}</ins></div>
          <div class="detail">&ldquo;{_e(err.context)}&rdquo;</div>
        </div>
        """

    html = f"""
<!doctype html>
<html>
<head>
  <meta charset="utf-8"/>
  <meta name="viewport" content="width=device-width, initial-scale=1"/>
  <title>Resume Analysis</title>
  <style>
    body {{
      font-family: ui-sans-serif, system-ui, -apple-system, Segoe UI, Roboto, Arial;
      background: #F8FAFC;
      color: #0F172A;
      margin: 0; padding: 24px;
    }}
    .wrap {{ max-width: 1080px; margin: 0 auto; }}
    .hero, .panel, .card {{
      background: #FFFFFF;
      border: 1px solid #E2E8F0;
      border-radius: 16px;
    }}
    .hero {{ padding: 18px; }}
    .panel {{ padding: 16px; }}
    .card {{ padding: 12px; margin-bottom: 10px; }}
    .row {{ display: grid; grid-template-columns: 1fr 2fr; gap: 14px; margin-top: 14px; }}
    .row2 {{ display: grid; grid-template-columns: 1fr 1fr; gap: 14px; margin-top: 14px; }}
    .muted {{ color: #64748B; font-size: 13px; }}
    .gauge {{ width: 100%; max-width: 240px; display: block; margin: 0 auto; }}
    .gauge .track {{ fill: none; stroke: #E2E8F0; stroke-width: 18; stroke-linecap: round; }}
    .gauge .value {{ fill: none; stroke: #3B82F6; stroke-width: 18; stroke-linecap: round; }}
    .gauge-label {{ font-size: 34px; font-weight: 800; fill: #2563EB; }}
    .bar {{ height: 28px; background: #E2E8F0; border-radius: 8px; overflow: hidden; margin-top: 10px; }}
    .bar > div {{ height: 100%; background: #10B981; }}
    .kpi {{ font-size: 28px; font-weight: 800; color: #059669; }}
    .tag {{
      display: inline-block; font-size: 12px; padding: 4px 10px; margin: 0 6px 6px 0;
      border-radius: 999px; border: 1px solid;
    }}
    .tag.missing {{ color: #BE123C; border-color: #FECDD3; background: #FFF1F2; }}
    .tag.suggested {{ color: #047857; border-color: #A7F3D0; background: #ECFDF5; }}
    .badge {{
      display: inline-block; font-size: 11px; padding: 3px 8px; border-radius: 999px;
      border: 1px solid; margin-bottom: 6px; text-transform: uppercase; font-weight: 700;
    }}
    .title {{ font-weight: 700; margin-bottom: 4px; }}
    .detail {{ color: #475569; font-size: 13px; line-height: 1.4; }}
    del.orig {{ color: #E11D48; }}
    ins.fix {{ color: #059669; text-decoration: none; font-weight: 700; }}
    ul {{ margin: 8px 0 0 18px; }}
    @media (max-width: 820px) {{
      .row, .row2 {{ grid-template-columns: 1fr; }}
    }}
  </style>
</head>
<body>
  <div class="wrap">
    <div class="hero">
      <div class="muted">Generated: {now}</div>
      <h1 style="margin:8px 0 0; font-size: 22px;">Resume Analysis</h1>
      <div class="muted">{f"Target: {target}" if target else "Comprehensive review of your application"}</div>
      {f'<div class="muted">Filename: {_e(filename)}</div>' if filename else ""}
    </div>

    <div class="row">
      <div class="panel">
        <div class="muted">Overall Rating</div>
        {_gauge(result.overall_score)}
        <div class="muted" style="text-align:center;">Base quality score</div>
      </div>
      <div class="panel">
        <div class="muted">Job Match Alignment</div>
        <div class="kpi">{ja.match_percentage}%</div>
        <div class="bar"><div style="width:{ja.match_percentage}%;"></div></div>
        <p class="detail">{_e(ja.role_fit_summary)}</p>
      </div>
    </div>

    <div class="panel" style="margin-top:14px;">
      <div class="muted">Summary</div>
      <p>{_e(result.summary)}</p>
    </div>

    <div class="row2">
      <div class="panel">
        <div class="muted">Strengths</div>
        <ul class="strengths">{_li(result.strengths)}</ul>
      </div>
      <div class="panel">
        <div class="muted">Weaknesses</div>
        <ul class="weaknesses">{_li(result.weaknesses)}</ul>
      </div>
    </div>

    <div class="row2">
      <div class="panel">
        <div class="muted">Missing Keywords</div>
        <div style="margin-top:10px;">{_tags(ja.missing_keywords, "missing")}</div>
      </div>
      <div class="panel">
        <div class="muted">Suggested Keywords</div>
        <div style="margin-top:10px;">{_tags(ja.suggested_keywords, "suggested")}</div>
      </div>
    </div>

    <div class="row2">
      <div class="panel">
        <div class="muted">Improvement Plan</div>
        <div style="margin-top:10px;">{cards or "<div class='muted'>—</div>"}</div>
      </div>
      <div class="panel">
        <div class="muted">Spelling &amp; Grammar</div>
        <div style="margin-top:10px;">{corrections or "<div class='muted'>No issues found.</div>"}</div>
      </div>
    </div>
  </div>
</body>
</html>
"""
    return html
