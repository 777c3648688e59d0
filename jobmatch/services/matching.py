"""Keyword-based job matching between resume skills and job requirements."""

import random

MIN_SCORE = 30
MAX_SCORE = 95
VARIANCE = 10


def skill_matches(skill, requirement):
    """Case-insensitive substring containment in either direction."""
    skill, requirement = skill.lower(), requirement.lower()
    return skill in requirement or requirement in skill


def matching_skills(skills, requirements):
    return [
        skill for skill in skills
        if any(skill_matches(skill, req) for req in requirements)
    ]


def base_match_score(skills, requirements):
    """Share of requirements covered, as a percentage. Deterministic."""
    if not requirements:
        return None
    return len(matching_skills(skills, requirements)) / len(requirements) * 100


def calculate_match_score(skills, requirements, rng=None):
    """
    Score a resume against a job, 30-95.

    The score is deliberately noisy: a +/-10 perturbation is added before
    clamping, and jobs without requirements get a random 70-99. Pass a seeded
    ``random.Random`` for reproducible results.
    """
    rng = rng or random

    base = base_match_score(skills, requirements)
    if base is None:
        return rng.randint(70, 99)

    perturbed = base + rng.uniform(-VARIANCE, VARIANCE)
    return min(max(round(perturbed), MIN_SCORE), MAX_SCORE)


def find_matches(skills, jobs, limit=3, rng=None):
    """
    Rank jobs for a resume.

    ``jobs`` are dicts with a ``requirements`` list. Returns the top ``limit``
    entries as ``{"job", "score", "matching_skills"}`` ordered by score.
    """
    matches = []
    for job in jobs:
        requirements = job.get("requirements") or []
        matches.append({
            "job": job,
            "score": calculate_match_score(skills, requirements, rng=rng),
            "matching_skills": matching_skills(skills, requirements),
        })

    matches.sort(key=lambda m: m["score"], reverse=True)
    return matches[:limit]
