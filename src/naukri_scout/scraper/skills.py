"""Skill matching between a job's skills and the configured skill set."""

from __future__ import annotations

from typing import Sequence


def _normalize(skill: str) -> str:
    return skill.strip().lower()


def match_skills(job_skills: Sequence[str], configured_skills: Sequence[str]) -> list[str]:
    """Return the job skills that match any configured skill.

    Matching is case-insensitive containment in either direction, so
    ``"node"`` matches ``"node.js"`` and ``"node.js developer"`` matches
    ``"node.js"``. Short configured skills can therefore produce false
    positives; that is accepted.

    Matched skills are returned in their original spelling and order.
    """
    if not job_skills or not configured_skills:
        return []

    wanted = [_normalize(s) for s in configured_skills]
    wanted = [s for s in wanted if s]

    matched = []
    for skill in job_skills:
        normalized = _normalize(skill)
        if not normalized:
            continue
        if any(normalized in want or want in normalized for want in wanted):
            matched.append(skill)
    return matched
