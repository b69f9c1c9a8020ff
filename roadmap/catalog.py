"""Static content for the homebuyer roadmap.

Survey questions with their closed option sets, the committed-timeline
choices, and the four default steps with tips and to-do items. This is
configuration data: nothing here mutates at runtime.
"""

ANSWER_FIELDS = ["income", "savings", "location", "timeline", "housing"]

SURVEY_QUESTIONS = [
    {
        "key": "income",
        "question": "What is your approximate annual household income (before taxes)?",
        "options": ["Under $50,000", "$50,000 - $100,000", "$100,000 - $150,000", "$150,000+"],
    },
    {
        "key": "savings",
        "question": "How much have you saved (or expect to save) for a down payment?",
        "options": ["Less than $10,000", "$10,000 - $25,000", "$25,000 - $50,000", "$50,000+"],
    },
    {
        "key": "location",
        "question": "Do you know where you'd like to buy a home?",
        "options": [
            "Yes — I have a specific city or neighborhood in mind",
            "I have a general area in mind",
            "Not sure yet",
        ],
    },
    {
        "key": "timeline",
        "question": "When are you hoping to buy your first home?",
        "options": ["Within the next 3 months", "3-6 months", "6-12 months", "More than a year from now"],
    },
    {
        "key": "housing",
        "question": "What best describes your current housing situation?",
        "options": [
            "Renting",
            "Living with family or friends",
            "Own a home already (looking to buy again)",
            "Other",
        ],
    },
]

ANSWER_OPTIONS = {q["key"]: list(q["options"]) for q in SURVEY_QUESTIONS}

TIMELINE_COMMIT_OPTIONS = [
    "Within 3 months",
    "Within 6 months",
    "Within 1 year",
    "Within 2 years",
    "I'm flexible",
]

DEFAULT_STEPS = [
    {
        "id": 1,
        "title": "Get Your Finances Ready",
        "description": "Build a solid financial foundation before house hunting.",
        "tips": [
            "Check and boost your credit score — aim for 620+",
            "Pay down existing debts to improve your debt-to-income ratio",
            "Start saving aggressively for your down payment",
            "Create a monthly budget that accounts for future mortgage payments",
        ],
        "todos": [
            {"id": "1a", "text": "Check your credit score"},
            {"id": "1b", "text": "Create a savings plan"},
            {"id": "1c", "text": "Pay down high-interest debt"},
            {"id": "1d", "text": "Set up a dedicated home savings account"},
        ],
    },
    {
        "id": 2,
        "title": "Get Pre-Approved",
        "description": "Secure a mortgage pre-approval to know your budget.",
        "tips": [
            "Shop around — compare rates from at least 3 lenders",
            "Gather documents: pay stubs, tax returns, bank statements",
            "Understand the difference between pre-qualification and pre-approval",
            "Don't open new credit cards or make large purchases during this time",
        ],
        "todos": [
            {"id": "2a", "text": "Research mortgage lenders"},
            {"id": "2b", "text": "Gather financial documents"},
            {"id": "2c", "text": "Apply for pre-approval"},
            {"id": "2d", "text": "Compare loan offers"},
        ],
    },
    {
        "id": 3,
        "title": "Find Your Home",
        "description": "Search, tour, and identify the right home for you.",
        "tips": [
            "Find a good Realtor — choose someone you trust and like!",
            "Think about proximity vs costs when choosing a neighborhood",
            "Make a list of needs vs nice-to-haves",
            "Research areas you might like to live in",
        ],
        "todos": [
            {"id": "3a", "text": "Find a good realtor"},
            {"id": "3b", "text": "Identify your needs vs. nice-to-haves"},
            {"id": "3c", "text": "Research areas you might like to live"},
            {"id": "3d", "text": "Tour at least 5 homes"},
            {"id": "3e", "text": "Make an offer"},
        ],
    },
    {
        "id": 4,
        "title": "Close the Deal",
        "description": "Navigate inspections, appraisals, and closing day!",
        "tips": [
            "Get a home inspection — don't skip this!",
            "Review closing costs carefully before signing",
            "Get homeowner's insurance set up before closing",
            "Do a final walk-through of the property",
        ],
        "todos": [
            {"id": "4a", "text": "Schedule home inspection"},
            {"id": "4b", "text": "Review and understand closing costs"},
            {"id": "4c", "text": "Set up homeowner's insurance"},
            {"id": "4d", "text": "Final walk-through"},
            {"id": "4e", "text": "Sign closing documents"},
        ],
    },
]
