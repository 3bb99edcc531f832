from typing import Dict, Optional

from infra.llm.client import complete_text
from infra.llm.prompts import CAREER_INSIGHTS_SYSTEM


def _na(value) -> str:
    return "N/A" if value in (None, "", []) else str(value)


def _footprint_section(footprint: Dict) -> str:
    gh = footprint.get("githubData") or {}
    gh_profile = gh.get("profile") or {}
    gh_stats = gh.get("stats") or {}
    so = footprint.get("stackoverflowData") or {}
    so_profile = so.get("profile") or {}
    so_stats = so.get("stats") or {}
    badges = so_profile.get("badges") or {}
    reputation = so_profile.get("reputation")
    tags = ", ".join(f"{t.get('name')} ({t.get('count')})" for t in (so.get("topTags") or [])[:5])
    return f"""
Developer Footprint Analysis:
GitHub Profile:
- Public Repositories: {_na(gh_profile.get('publicRepos'))}
- Followers: {_na(gh_profile.get('followers'))}
- Recent Commits: {_na(gh_stats.get('totalCommits'))}
- Primary Languages: {_na(', '.join(gh_stats.get('languages') or []))}
- Location: {_na(gh_profile.get('location'))}

Stack Overflow Profile:
- Reputation: {f'{reputation:,}' if isinstance(reputation, int) else _na(reputation)}
- Answers: {_na(so_stats.get('answerCount'))}
- Questions: {_na(so_stats.get('questionCount'))}
- Top Tags: {_na(tags)}
- Badges: Gold {badges.get('gold') or 0}, Silver {badges.get('silver') or 0}, Bronze {badges.get('bronze') or 0}
"""


def build_insights_prompt(cv_analysis: Optional[Dict], applications: int,
                          profile: Optional[Dict], footprint: Optional[Dict]) -> str:
    cv = cv_analysis or {}
    has_fp = bool(footprint)
    extra = lambda text: f" - {text}" if has_fp else ""  # noqa: E731
    lines = [
        "Profile Data:",
        f"- CV Score: {_na(cv.get('score'))}",
        f"- Strengths: {_na(', '.join(cv.get('strengths') or []))}",
        f"- Improvement Areas: {_na(', '.join(cv.get('improvements') or []))}",
        f"- Total Applications: {applications}",
        f"- Profile Completeness: {_na((profile or {}).get('completeness'))}%",
    ]
    if has_fp:
        lines.append(_footprint_section(footprint))
    lines += [
        "Generate a comprehensive Career Insights Report with:",
        "1. Current Position Analysis (2-3 sentences)"
        + extra("Include insights from their public developer footprint"),
        "2. Key Strengths to Leverage (3-4 bullet points)"
        + extra("Reference their GitHub activity and Stack Overflow contributions"),
        "3. Priority Development Areas (3-4 bullet points)",
        "4. Strategic Next Steps (4-5 actionable recommendations)"
        + extra("Consider their technology stack and community engagement"),
        "5. Market Positioning Advice (2-3 sentences)"
        + extra("Use their technical footprint to position them in the market"),
    ]
    if has_fp:
        lines.append("6. Developer Footprint Summary (2-3 sentences highlighting their "
                     "public contributions and community presence)")
    lines += ["", "Format the response in markdown with clear sections."]
    return "\n".join(lines)


async def career_insights(cv_analysis: Optional[Dict], applications: int,
                          profile: Optional[Dict], footprint: Optional[Dict]) -> str:
    return await complete_text(
        CAREER_INSIGHTS_SYSTEM,
        build_insights_prompt(cv_analysis, applications, profile, footprint),
    )
