"""Demo data: users, projects, statuses, email threads with messages, timelines and tasks."""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy.orm import Session

from projecthub.db.models import (
    EmailAttachment,
    EmailMessage,
    EmailParticipant,
    EmailThread,
    EventType,
    ParticipantRole,
    Priority,
    Project,
    ProjectMember,
    ProjectState,
    ProjectStatus,
    Task,
    ThreadTag,
    TimelineEvent,
    TimelineView,
    User,
)
from projecthub.utils.logger import get_logger

logger = get_logger("projecthub.db.seed_data")

JOHN = "john.doe@company.com"
ALICE = "alice.smith@company.com"
BOB = "bob.wilson@company.com"
SARAH = "sarah.johnson@company.com"

USERS = [
    (JOHN, "John Doe"),
    (ALICE, "Alice Smith"),
    (BOB, "Bob Wilson"),
    (SARAH, "Sarah Johnson"),
]

STATUSES = [
    ("Planning", "Initial planning phase", "#3B82F6"),
    ("In Progress", "Active development", "#F59E0B"),
    ("Review", "Under review", "#8B5CF6"),
    ("Completed", "Task completed", "#10B981"),
]

Q4_SUBJECT = "Q4 Product Launch - Project Status Update"
PORTAL_SUBJECT = "Client Feedback - Portal Redesign Discussion"
STANDUP_SUBJECT = "Weekly Team Standup - Development Updates"


def _at(value: str) -> datetime:
    return datetime.fromisoformat(value).replace(tzinfo=timezone.utc)


def _thread(key: str, subject: str, project: Any, participants: list[tuple[str, ParticipantRole]], tags: list[tuple[str, str]], users: dict[str, User]) -> EmailThread:
    return EmailThread(
        thread_key=key,
        subject=subject,
        project=project,
        participants=[
            EmailParticipant(email=email, name=users[email].name, role=role, user_id=users[email].id)
            for email, role in participants
        ],
        tags=[ThreadTag(name=name, color=color) for name, color in tags],
    )


def _message(key: str, sender: str, to: list[str], cc: list[str], subject: str, text: str, at: str, **flags: Any) -> EmailMessage:
    body = "".join(f"<p>{p}</p>" for p in text.split("\n"))
    return EmailMessage(
        message_key=key,
        from_address=sender,
        to=to,
        cc=cc,
        bcc=[],
        subject=subject,
        body=body,
        text_body=text.replace("\n", " "),
        timestamp=_at(at),
        is_read=True,
        **flags,
    )


def seed_demo_data(session: Session) -> None:
    """Insert the demo data set. Caller commits."""
    users = {}
    for email, name in USERS:
        first = name.split()[0]
        user = User(email=email, name=name, avatar=f"https://api.dicebear.com/7.x/avataaars/svg?seed={first}")
        session.add(user)
        users[email] = user
    session.flush()
    logger.info("seed_data.users", count=len(users))

    launch = Project(
        name="Q4 Product Launch",
        description="Launch of the new product features for Q4",
        status=ProjectState.ACTIVE,
        priority=Priority.HIGH,
        start_date=_at("2024-10-01T00:00:00"),
        end_date=_at("2024-12-31T00:00:00"),
        created_by=users[JOHN].id,
        members=[ProjectMember(user_id=u.id, role="OWNER" if e == JOHN else "MEMBER") for e, u in users.items()],
    )
    portal = Project(
        name="Client Portal Redesign",
        description="Redesign of the client-facing portal",
        status=ProjectState.ACTIVE,
        priority=Priority.MEDIUM,
        start_date=_at("2024-11-01T00:00:00"),
        end_date=_at("2025-02-28T00:00:00"),
        created_by=users[ALICE].id,
        members=[ProjectMember(user_id=users[ALICE].id, role="OWNER"), ProjectMember(user_id=users[BOB].id)],
    )
    session.add_all([launch, portal])
    statuses = [
        ProjectStatus(title=title, description=desc, color=color, order=i)
        for i, (title, desc, color) in enumerate(STATUSES, start=1)
    ]
    launch.statuses.extend(statuses)
    session.flush()
    logger.info("seed_data.projects", count=2, statuses=len(statuses))

    q4 = _thread(
        "thread_q4_launch_001",
        Q4_SUBJECT,
        launch,
        [(JOHN, ParticipantRole.FROM), (ALICE, ParticipantRole.TO), (BOB, ParticipantRole.CC), (SARAH, ParticipantRole.CC)],
        [("urgent", "#EF4444"), ("project", "#3B82F6"), ("q4", "#10B981")],
        users,
    )
    feedback = _thread(
        "thread_portal_feedback_002",
        PORTAL_SUBJECT,
        portal,
        [(ALICE, ParticipantRole.FROM), (JOHN, ParticipantRole.TO), (BOB, ParticipantRole.TO)],
        [("feedback", "#8B5CF6"), ("client", "#F59E0B"), ("design", "#06B6D4")],
        users,
    )
    standup = _thread(
        "thread_standup_003",
        STANDUP_SUBJECT,
        None,
        [(BOB, ParticipantRole.FROM), (JOHN, ParticipantRole.TO), (ALICE, ParticipantRole.TO), (SARAH, ParticipantRole.TO)],
        [("standup", "#10B981"), ("weekly", "#6B7280")],
        users,
    )
    session.add_all([q4, feedback, standup])
    session.flush()

    m1 = _message(
        "msg_q4_launch_001", JOHN, [ALICE], [BOB, SARAH], Q4_SUBJECT,
        "Hi team,\nQ4 launch is on track for the December deadline: core features are 80% complete and testing begins next week.\nBest regards, John",
        "2024-11-15T10:00:00",
    )
    m2 = _message(
        "msg_q4_launch_002", ALICE, [JOHN], [BOB, SARAH], f"Re: {Q4_SUBJECT}",
        "Thanks for the update, John!\nWill we have enough time for user acceptance testing? I attached the updated marketing requirements.\nBest, Alice",
        "2024-11-15T14:30:00",
        is_replied=True,
    )
    m2.attachments.append(
        EmailAttachment(
            filename="marketing_requirements_v2.pdf",
            content_type="application/pdf",
            size=2048576,
            url="https://example.com/files/marketing_requirements_v2.pdf",
        )
    )
    m3 = _message(
        "msg_q4_launch_003", JOHN, [ALICE], [BOB, SARAH], f"Re: {Q4_SUBJECT}",
        "Great questions, Alice!\nTwo weeks are allocated for UAT and a beta goes to select customers in early December.\nThanks, John",
        "2024-11-15T16:45:00",
        is_replied=True,
    )
    q4.messages.extend([m1, m2, m3])
    m4 = _message(
        "msg_portal_feedback_001", ALICE, [JOHN, BOB], [], PORTAL_SUBJECT,
        "Hi John and Bob,\nThe client likes the new portal but wants more dashboard customization and data visualization options.\nBest, Alice",
        "2024-11-14T09:15:00",
    )
    m4.attachments.append(
        EmailAttachment(
            filename="client_feedback_portal.pdf",
            content_type="application/pdf",
            size=1536000,
            url="https://example.com/files/client_feedback_portal.pdf",
        )
    )
    m5 = _message(
        "msg_portal_feedback_002", BOB, [ALICE, JOHN], [], f"Re: {PORTAL_SUBJECT}",
        "Thanks for sharing this, Alice!\nI will write a technical specification for the requested features.\nBob",
        "2024-11-14T11:30:00",
        is_replied=True,
    )
    feedback.messages.extend([m4, m5])
    session.flush()
    m2.parent_message_id = m1.id
    m3.parent_message_id = m2.id
    m5.parent_message_id = m4.id
    logger.info("seed_data.email", threads=3, messages=5)

    q4_view = TimelineView(
        thread=q4,
        title="Q4 Launch Project Timeline",
        description="Visual timeline of the Q4 product launch discussion",
        is_public=True,
        events=[
            TimelineEvent(message=m1, event_type=EventType.EMAIL_RECEIVED, title="Project Status Update Sent",
                          description="John sent the initial project status update to the team",
                          timestamp=m1.timestamp, order=1, event_metadata={"sender": "John Doe", "recipients": 4}),
            TimelineEvent(message=m2, event_type=EventType.EMAIL_REPLIED, title="Alice Responded with Questions",
                          description="Alice replied with questions about testing timeline and attached marketing requirements",
                          timestamp=m2.timestamp, order=2, event_metadata={"sender": "Alice Smith", "attachments": 1}),
            TimelineEvent(message=m3, event_type=EventType.EMAIL_REPLIED, title="John Provided Answers",
                          description="John answered Alice's questions about UAT and beta release plans",
                          timestamp=m3.timestamp, order=3,
                          event_metadata={"sender": "John Doe", "confirmedUAT": True, "confirmedBeta": True}),
        ],
    )
    portal_view = TimelineView(
        thread=feedback,
        title="Portal Redesign Feedback Timeline",
        description="Timeline of client feedback and responses",
        is_public=False,
        events=[
            TimelineEvent(message=m4, event_type=EventType.EMAIL_RECEIVED, title="Client Feedback Received",
                          description="Alice shared client feedback about portal redesign",
                          timestamp=m4.timestamp, order=1,
                          event_metadata={"sender": "Alice Smith", "feedbackType": "positive", "attachments": 1}),
            TimelineEvent(message=m5, event_type=EventType.EMAIL_REPLIED, title="Bob Acknowledged Feedback",
                          description="Bob acknowledged the feedback and committed to creating technical specifications",
                          timestamp=m5.timestamp, order=2,
                          event_metadata={"sender": "Bob Wilson", "actionRequired": "technical_specs"}),
        ],
    )
    session.add_all([q4_view, portal_view])
    logger.info("seed_data.timelines", count=2, events=5)

    session.add_all(
        [
            Task(project=launch, status=statuses[1], title="Complete Core Features Development",
                 description="Finish the remaining 20% of core features for Q4 launch",
                 priority=Priority.HIGH, due_date=_at("2024-11-30T00:00:00"), assignee=users[BOB]),
            Task(project=launch, status=statuses[0], title="Prepare Marketing Materials",
                 description="Create marketing materials for the Q4 product launch",
                 priority=Priority.MEDIUM, due_date=_at("2024-12-15T00:00:00"), assignee=users[ALICE]),
            Task(project=portal, title="Implement Dashboard Customization",
                 description="Add customization options to the portal dashboard based on client feedback",
                 priority=Priority.HIGH, due_date=_at("2025-01-15T00:00:00"), assignee=users[BOB]),
        ]
    )
    session.flush()
    logger.info("seed_data.tasks", count=3)
