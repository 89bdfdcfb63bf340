"""SMS text for each notification event."""

EVENTS = (
    "worker_registered",
    "employer_registered",
    "job_alert",
    "application_received",
    "application_status",
    "job_reminder",
    "payment_recorded",
    "login_otp",
)

TEMPLATES = {
    "worker_registered": (
        "Welcome to SINDH, {name}! Your profile is live with a ShaktiScore of {shakti_score}. "
        "We will message you when matching work is posted."
    ),
    "employer_registered": (
        "Welcome to SINDH, {name}! {company_name} can now post jobs and review applicants."
    ),
    "job_alert": (
        "New job alert! {title} near {address}. Wage: Rs {wage_amount} {wage_period}. "
        "Match: {match_percent}%. Open SINDH to apply."
    ),
    "application_received": (
        "New application! {worker_name} has applied for your job: {title}. "
        "Review their application and decide whether to accept or reject."
    ),
    "job_reminder": "Reminder: your job {title} starts on {start_date}. Don't forget!",
    "payment_recorded": "Payment of Rs {amount} received for {title}. Thank you for your work!",
    "login_otp": "Your SINDH login code is {code}. It expires in {ttl_minutes} minutes. Do not share it.",
}

STATUS_TEMPLATES = {
    "accepted": "Congratulations! You've been selected for the job: {title}. Please check SINDH for details.",
    "rejected": (
        "Update on your application for {title}: your application was not selected this time. "
        "Keep applying!"
    ),
    "in-progress": "Your work on {title} has been marked as started. Good luck with your new assignment!",
    "completed": "Your work on {title} has been marked as completed. Great job!",
}


class _Defaults(dict):
    """Format mapping that renders missing fields as blanks."""

    def __missing__(self, key):
        return ""


def build_message(event: str, **context) -> str:
    """
    Render the SMS text for an event.

    Args:
        event: One of EVENTS
        **context: Template fields; application_status also needs ``status``

    Raises:
        ValueError: If the event (or application status) has no template
    """
    if event == "application_status":
        status = context.get("status")
        if status not in STATUS_TEMPLATES:
            raise ValueError(f"No message for application status: {status}")
        template = STATUS_TEMPLATES[status]
    elif event in TEMPLATES:
        template = TEMPLATES[event]
    else:
        raise ValueError(f"Unknown notification event: {event}")

    values = _Defaults({k: v for k, v in context.items() if v is not None})
    return " ".join(template.format_map(values).split())
