"""Fixed sample records used to seed an empty store."""

from __future__ import annotations

from typing import Any

SAMPLE_NOTES: list[dict[str, Any]] = [
    {
        "id": "note1",
        "title": "Web Development Trends 2024",
        "category": "Research",
        "content": (
            "Exploration of emerging frameworks, tools, and methodologies that will "
            "shape frontend development in the coming year. Key trends include:\n\n"
            "- **AI-assisted coding** becoming mainstream\n"
            "- Increased adoption of **WebAssembly**\n"
            "- **Edge computing** for web applications\n"
            "- **Micro-frontends** architecture gaining popularity\n"
            "- **Server components** in React and other frameworks"
        ),
        "tags": ["Tech", "Trends"],
        "createdAt": "2023-11-14T10:30:00Z",
        "updatedAt": "2023-11-14T14:45:00Z",
    },
    {
        "id": "note2",
        "title": "Q2 Marketing Strategy",
        "category": "Meeting",
        "content": (
            "Notes from the leadership meeting discussing marketing initiatives, "
            "budget allocations, and campaign timelines.\n\n"
            "# Key Decisions\n\n"
            "1. Increase social media budget by 15%\n"
            "2. Launch new product line in May\n"
            "3. Redesign website homepage\n"
            "4. Partner with influencers in our industry\n\n"
            "# Action Items\n\n"
            "- Sarah to prepare social media calendar\n"
            "- John to finalize product launch materials\n"
            "- Team to review website mockups by Friday"
        ),
        "tags": ["Marketing"],
        "createdAt": "2023-11-12T09:00:00Z",
        "updatedAt": "2023-11-13T11:20:00Z",
    },
    {
        "id": "note3",
        "title": "Book Club Reading List",
        "category": "Personal",
        "content": (
            "Curated selection of novels for monthly book club meetings with ratings "
            "and discussion points for each title.\n\n"
            "## January\n*The Midnight Library* by Matt Haig\n\n"
            "## February\n*Project Hail Mary* by Andy Weir\n\n"
            "## March\n*Klara and the Sun* by Kazuo Ishiguro\n\n"
            "## April\n*The Lincoln Highway* by Amor Towles"
        ),
        "tags": ["Reading"],
        "createdAt": "2023-11-09T16:15:00Z",
        "updatedAt": "2023-11-09T16:15:00Z",
    },
    {
        "id": "note4",
        "title": "Mobile App UI Design System",
        "category": "Project",
        "content": (
            "Complete UI documentation for the company's flagship mobile application "
            "covering colors, typography and components.\n\n"
            "### Color Palette\n"
            "- Primary: #3B82F6\n- Secondary: #8B5CF6\n- Accent: #10B981\n"
            "- Background: #F9FAFB\n- Text: #1F2937\n\n"
            "### Typography\n"
            "- Headings: Inter Bold\n- Body: Inter Regular\n- Buttons: Inter Medium"
        ),
        "tags": ["Design", "UI"],
        "createdAt": "2023-11-11T13:45:00Z",
        "updatedAt": "2023-11-11T13:45:00Z",
    },
]

SAMPLE_TASKS: list[dict[str, Any]] = [
    {
        "id": "task1",
        "title": "Complete research for client proposal",
        "dueDate": "2023-11-14T16:00:00Z",
        "priority": "High",
        "completed": False,
        "createdAt": "2023-11-13T09:30:00Z",
        "updatedAt": "2023-11-13T09:30:00Z",
    },
    {
        "id": "task2",
        "title": "Schedule team meeting for Q2 planning",
        "dueDate": "2023-11-15T12:00:00Z",
        "priority": "Medium",
        "completed": False,
        "createdAt": "2023-11-13T10:15:00Z",
        "updatedAt": "2023-11-13T10:15:00Z",
    },
    {
        "id": "task3",
        "title": "Update expense reports",
        "dueDate": "2023-11-13T17:00:00Z",
        "priority": "Low",
        "completed": True,
        "createdAt": "2023-11-12T14:00:00Z",
        "updatedAt": "2023-11-13T11:30:00Z",
    },
]

SAMPLE_EVENTS: list[dict[str, Any]] = [
    {
        "id": "event1",
        "title": "Team Meeting",
        "start": "2023-11-14T14:00:00Z",
        "end": "2023-11-14T15:30:00Z",
        "category": "Work",
        "description": "Weekly team sync to discuss project progress and roadblocks.",
        "createdAt": "2023-11-10T09:00:00Z",
        "updatedAt": "2023-11-10T09:00:00Z",
    },
    {
        "id": "event2",
        "title": "Project Deadline",
        "start": "2023-11-14T18:00:00Z",
        "end": "2023-11-14T18:00:00Z",
        "category": "Work",
        "description": "Final submission deadline for the client project.",
        "createdAt": "2023-11-01T10:30:00Z",
        "updatedAt": "2023-11-01T10:30:00Z",
    },
    {
        "id": "event3",
        "title": "Dentist Appointment",
        "start": "2023-11-16T13:00:00Z",
        "end": "2023-11-16T14:00:00Z",
        "category": "Personal",
        "description": "Regular checkup at Dr. Smith's office.",
        "createdAt": "2023-11-05T11:15:00Z",
        "updatedAt": "2023-11-05T11:15:00Z",
    },
    {
        "id": "event4",
        "title": "Birthday Party",
        "start": "2023-11-18T18:00:00Z",
        "end": "2023-11-18T22:00:00Z",
        "category": "Personal",
        "description": "Sarah's birthday celebration at Riverfront Restaurant.",
        "createdAt": "2023-11-02T09:45:00Z",
        "updatedAt": "2023-11-02T09:45:00Z",
    },
]

SAMPLE_BOOKMARKS: list[dict[str, Any]] = []

SAMPLE_PROJECTS: list[dict[str, Any]] = []
