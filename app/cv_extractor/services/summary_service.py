"""
Candidate summary document.

Renders an extracted profile as the plain-text introduction that recruiters
paste into an e-mail to the hiring manager.
"""

from ..models import ExtractedCandidateProfile, Qualification, WorkExperience

LABEL_WIDTH = 24


def _yes_no(value: bool) -> str:
    return "Yes" if value else "No"


def _field_line(label: str, value: object) -> str:
    return f"{label + ':':<{LABEL_WIDTH}}{value}"


def format_work_experience(job: WorkExperience) -> str:
    return "\n".join(
        [
            job.duration,
            job.company,
            job.position,
            f"**Reason for leaving: {job.reason_for_leaving}",
        ]
    )


def format_qualification(qualification: Qualification) -> str:
    return f"{qualification.institution}\n{qualification.course} | {qualification.year}"


def render_candidate_summary(
    profile: ExtractedCandidateProfile, recipient_name: str = "Sarah"
) -> str:
    """
    Render the candidate summary for the clipboard.

    Args:
        profile: The extracted candidate profile.
        recipient_name: Name used in the greeting.

    Returns:
        The summary text. Jobs and qualifications keep the profile order.
    """
    experience = "\n\n".join(format_work_experience(job) for job in profile.work_history)
    qualifications = "\n\n".join(
        format_qualification(q) for q in profile.qualifications
    )

    fields = "\n".join(
        [
            _field_line("Notice Period", profile.notice_period),
            _field_line("Salary Requirement", profile.salary_requirement),
            _field_line("Age", profile.age),
            _field_line("Driver's License", _yes_no(profile.drivers_license)),
            _field_line("Own transport", _yes_no(profile.own_transport)),
        ]
    )

    sections = [
        f"Dear {recipient_name}",
        "I hope you are well.",
        f"I am pleased to present {profile.full_name} as a candidate for the role you are hiring for.",
        "Experience:",
        experience,
        "Qualifications",
        qualifications,
        fields,
        "References:",
        "Available upon request.",
        "Kindly advise if this candidate is of interest to you.",
        "Kind Regards",
    ]
    return "\n\n".join(section for section in sections if section) + "\n"
