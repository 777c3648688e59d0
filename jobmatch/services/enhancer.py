"""Template-based text enhancement for job posts and resumes."""

JOB_TEMPLATE = """\
Exciting Opportunity: {title}

We are seeking a talented {title} to join our dynamic team.

What You'll Do:
{description}

What We Offer:
- Competitive compensation package
- Comprehensive health, dental, and vision insurance
- Flexible work arrangements and remote options
- Professional development opportunities
- Modern technology stack and tools
- Collaborative and inclusive work environment

About the Role:
Join our innovative team where you'll have the opportunity to make a significant impact while growing your career. We value creativity, collaboration, and continuous learning.

Ready to take the next step in your career? We'd love to hear from you!"""

ACTION_VERBS = {
    "worked on": "Delivered",
    "responsible for": "Owned",
    "helped": "Contributed to",
    "did": "Executed",
    "made": "Built",
    "used": "Leveraged",
}


def enhance_job_description(title, description):
    return JOB_TEMPLATE.format(title=title.strip(), description=description.strip())


def _strengthen(line):
    lowered = line.lower()
    for weak, strong in ACTION_VERBS.items():
        if lowered.startswith(weak):
            return f"{strong}{line[len(weak):]}"
    return line


def rewrite_resume(text, skills, experience):
    """
    Produce an improved resume: a summary headline, a skills section, the
    experience highlights, and the original body with weak openers replaced
    by action verbs.
    """
    headline = experience[0] if experience else "Experienced professional"
    lines = [
        "PROFESSIONAL SUMMARY",
        f"{headline} with hands-on expertise in {', '.join(skills[:5]) or 'a broad set of tools'}.",
        "",
        "CORE SKILLS",
        " | ".join(skills),
        "",
        "EXPERIENCE HIGHLIGHTS",
    ]
    lines.extend(f"- {item}" for item in experience)
    lines.extend(["", "DETAILS"])
    lines.extend(_strengthen(line.strip()) for line in text.splitlines() if line.strip())
    return "\n".join(lines)
