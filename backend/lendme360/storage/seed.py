import logging

from .memory_storage import InMemoryStorageService
from .models import DirectReport, ReceivedRequest, SentRequest

logger = logging.getLogger(__name__)

# --- Demo data ---
SENT_REQUESTS_DATA = [
    {"id": "1", "name": "Sarah Johnson", "date": "2024-01-15", "status": "Completed"},
    {"id": "2", "name": "Michael Chen", "date": "2024-01-18", "status": "Submitted"},
    {"id": "3", "name": "Emma Williams", "date": "2024-01-20", "status": "Pending"},
    {"id": "4", "name": "James Brown", "date": "2024-01-22", "status": "Pending"},
]

RECEIVED_REQUESTS_DATA = [
    {"id": "1", "name": "Alex Thompson", "date": "2024-01-14", "status": "Pending"},
    {"id": "2", "name": "Lisa Garcia", "date": "2024-01-16", "status": "Pending"},
    {
        "id": "3",
        "name": "David Kim",
        "date": "2024-01-10",
        "status": "Submitted",
        "response": {
            "startDoing": "Consider documenting decisions more thoroughly for future reference.",
            "stopDoing": "Avoid scheduling meetings during focus time blocks.",
            "continueDoing": "Great job facilitating team discussions and ensuring everyone has a voice.",
            "otherComments": "Overall a pleasure to work with!",
        },
    },
    {"id": "4", "name": "Rachel Martinez", "date": "2024-01-19", "status": "Pending"},
]

DIRECT_REPORTS_DATA = [
    {
        "id": "1",
        "name": "Emily Watson",
        "email": "emily.watson@example.com",
        "role": "Software Engineer",
        "cycleStatus": "Ongoing",
        "feedbackCount": 5,
        "feedbackSubmissions": [
            {
                "id": "fs-1",
                "submitterName": "John Smith",
                "submitterEmail": "john.smith@example.com",
                "relationship": "Peer",
                "date": "2024-01-20",
                "response": {
                    "startDoing": "Could benefit from sharing knowledge more proactively with the team through tech talks or documentation.",
                    "stopDoing": "Sometimes takes on too much work without delegating - it's okay to ask for help!",
                    "continueDoing": "Excellent code quality and attention to detail. Always delivers on time.",
                    "otherComments": "Emily is a fantastic team member and I enjoy collaborating with her.",
                },
            },
            {
                "id": "fs-2",
                "submitterName": "Sarah Chen",
                "submitterEmail": "sarah.chen@example.com",
                "relationship": "Cross-functional",
                "date": "2024-01-22",
                "response": {
                    "startDoing": "Would love to see more involvement in product planning discussions.",
                    "stopDoing": "No major concerns.",
                    "continueDoing": "Great at explaining technical concepts to non-technical stakeholders.",
                    "otherComments": "",
                },
            },
            {
                "id": "fs-3",
                "submitterName": "Marcus Johnson",
                "submitterEmail": "marcus.johnson@example.com",
                "relationship": "Direct-report",
                "date": "2024-01-23",
                "response": {
                    "startDoing": "More regular 1:1 check-ins would be appreciated.",
                    "stopDoing": "Sometimes the feedback can be too direct - a softer approach might help.",
                    "continueDoing": "Very supportive and always available when I have questions. Great mentor!",
                    "otherComments": "I've learned so much working under Emily.",
                },
            },
        ],
    },
    {
        "id": "2",
        "name": "Thomas Brown",
        "email": "thomas.brown@example.com",
        "role": "Senior Product Manager",
        "cycleStatus": "Ongoing",
        "feedbackCount": 4,
        "feedbackSubmissions": [
            {
                "id": "fs-4",
                "submitterName": "Alice Roberts",
                "submitterEmail": "alice.roberts@example.com",
                "relationship": "Peer",
                "date": "2024-01-18",
                "response": {
                    "startDoing": "Consider involving engineering earlier in the product discovery phase.",
                    "stopDoing": "Sometimes changes priorities mid-sprint which can be disruptive.",
                    "continueDoing": "Excellent stakeholder management and clear communication of product vision.",
                    "otherComments": "Tom is great to work with overall.",
                },
            },
        ],
    },
    {
        "id": "3",
        "name": "Jessica Lee",
        "email": "jessica.lee@example.com",
        "role": "Data Analyst",
        "cycleStatus": "Completed",
        "feedbackCount": 3,
        "feedbackSubmissions": [
            {
                "id": "fs-5",
                "submitterName": "Daniel Park",
                "submitterEmail": "daniel.park@example.com",
                "relationship": "Manager",
                "date": "2024-01-10",
                "response": {
                    "startDoing": "Could take more ownership of presenting insights to senior leadership.",
                    "stopDoing": "Nothing specific comes to mind.",
                    "continueDoing": "Thorough analysis and always backs up recommendations with data.",
                    "otherComments": "Jessica has grown tremendously this quarter.",
                },
            },
            {
                "id": "fs-6",
                "submitterName": "Olivia White",
                "submitterEmail": "olivia.white@example.com",
                "relationship": "Peer",
                "date": "2024-01-12",
                "response": {
                    "startDoing": "More documentation on data pipelines would help the team.",
                    "stopDoing": "No concerns.",
                    "continueDoing": "Always willing to help others understand the data. Great collaborator!",
                    "otherComments": "",
                },
            },
        ],
        "managerNotes": "Jessica had a strong feedback cycle. Main theme is encouraging her to take more visible leadership roles. Plan to discuss promotion path in next 1:1.",
        "completedDate": "2024-01-15",
    },
    {
        "id": "4",
        "name": "Ryan Mitchell",
        "email": "ryan.mitchell@example.com",
        "role": "UX Designer",
        "cycleStatus": "Ongoing",
        "feedbackCount": 6,
        "feedbackSubmissions": [],
    },
]


async def seed_demo_data(storage: InMemoryStorageService) -> None:
    """Loads the demo dataset into an empty store."""
    for rec in SENT_REQUESTS_DATA:
        request = SentRequest.model_validate(rec)
        await storage.set_model(f"sent_request:{request.id}", request)
    for rec in RECEIVED_REQUESTS_DATA:
        request = ReceivedRequest.model_validate(rec)
        await storage.set_model(f"received_request:{request.id}", request)
    for rec in DIRECT_REPORTS_DATA:
        report = DirectReport.model_validate(rec)
        await storage.set_model(f"direct_report:{report.id}", report)
    logger.info(
        f"Seeded {len(SENT_REQUESTS_DATA)} sent requests, {len(RECEIVED_REQUESTS_DATA)} received requests "
        f"and {len(DIRECT_REPORTS_DATA)} direct reports."
    )
