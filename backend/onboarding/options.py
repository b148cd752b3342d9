"""Option lists backing the profile editor's selects."""
from __future__ import annotations

from typing import Dict, List

INDUSTRY_OPTIONS = [
    "Technology", "Healthcare", "Finance & Banking", "Real Estate", "E-commerce",
    "Manufacturing", "Education", "Hospitality & Tourism", "Food & Beverage", "Retail",
    "Professional Services", "Marketing & Advertising", "Construction",
    "Transportation & Logistics", "Energy & Utilities", "Non-profit", "Government",
    "Entertainment & Media", "Automotive", "Agriculture", "Consulting", "Legal Services",
    "Insurance", "Telecommunications", "Software as a Service (SaaS)",
]

US_STATES = [
    "Alabama", "Alaska", "Arizona", "Arkansas", "California", "Colorado",
    "Connecticut", "Delaware", "Florida", "Georgia", "Hawaii", "Idaho",
    "Illinois", "Indiana", "Iowa", "Kansas", "Kentucky", "Louisiana",
    "Maine", "Maryland", "Massachusetts", "Michigan", "Minnesota", "Mississippi",
    "Missouri", "Montana", "Nebraska", "Nevada", "New Hampshire", "New Jersey",
    "New Mexico", "New York", "North Carolina", "North Dakota", "Ohio", "Oklahoma",
    "Oregon", "Pennsylvania", "Rhode Island", "South Carolina", "South Dakota",
    "Tennessee", "Texas", "Utah", "Vermont", "Virginia", "Washington",
    "West Virginia", "Wisconsin", "Wyoming",
]

# City labels carry a comma ("Austin, TX"); they do not survive a comma split of icp_geo.
US_CITIES_BY_REGION: Dict[str, List[str]] = {
    "West Coast": [
        "Los Angeles, CA", "San Francisco, CA", "San Diego, CA", "San Jose, CA",
        "Seattle, WA", "Portland, OR", "Oakland, CA", "Sacramento, CA",
        "Fresno, CA", "Long Beach, CA", "Santa Ana, CA", "Anaheim, CA",
    ],
    "East Coast": [
        "New York, NY", "Boston, MA", "Philadelphia, PA", "Miami, FL",
        "Atlanta, GA", "Washington, DC", "Baltimore, MD", "Virginia Beach, VA",
        "Jacksonville, FL", "Tampa, FL", "Newark, NJ", "Buffalo, NY",
    ],
    "Texas": [
        "Houston, TX", "Dallas, TX", "San Antonio, TX", "Austin, TX",
        "Fort Worth, TX", "El Paso, TX", "Arlington, TX", "Corpus Christi, TX",
        "Plano, TX", "Laredo, TX", "Garland, TX", "Irving, TX",
    ],
    "Midwest": [
        "Chicago, IL", "Detroit, MI", "Indianapolis, IN", "Columbus, OH",
        "Milwaukee, WI", "Kansas City, MO", "Omaha, NE", "Minneapolis, MN",
        "Cleveland, OH", "Wichita, KS", "St. Louis, MO", "Cincinnati, OH",
    ],
    "Southwest": [
        "Phoenix, AZ", "Denver, CO", "Las Vegas, NV", "Albuquerque, NM",
        "Tucson, AZ", "Mesa, AZ", "Colorado Springs, CO", "Aurora, CO",
        "Henderson, NV", "Chandler, AZ", "Scottsdale, AZ", "Glendale, AZ",
    ],
    "Southeast": [
        "Charlotte, NC", "Nashville, TN", "Memphis, TN", "Louisville, KY",
        "New Orleans, LA", "Raleigh, NC", "Orlando, FL", "St. Petersburg, FL",
        "Greensboro, NC", "Durham, NC", "Norfolk, VA", "Chesapeake, VA",
    ],
}

GEOGRAPHY_OPTIONS_GROUPED: Dict[str, List[str]] = {
    "Nationwide": ["United States (Nationwide)"],
    "States": [f"{state} (State)" for state in US_STATES],
    **US_CITIES_BY_REGION,
}

GEOGRAPHY_OPTIONS = [option for group in GEOGRAPHY_OPTIONS_GROUPED.values() for option in group]

JOB_TITLE_OPTIONS = [
    "CEO", "COO", "CFO", "CTO", "CMO", "VP of Sales", "VP of Marketing", "VP of Operations",
    "Sales Director", "Marketing Director", "Operations Director", "Sales Manager",
    "Marketing Manager", "Operations Manager", "Account Manager",
    "Business Development Manager", "Project Manager", "Product Manager", "General Manager",
    "Regional Manager", "Territory Manager", "Channel Manager", "Partnership Manager",
    "Customer Success Manager", "Procurement Manager", "Purchasing Manager", "Buyer",
    "Senior Buyer", "Procurement Director", "Supply Chain Manager", "Logistics Manager",
    "Event Coordinator", "Event Manager", "Event Director", "Marketing Coordinator",
    "Sales Coordinator", "Business Analyst", "Decision Maker", "Key Stakeholder",
    "Department Head", "Team Lead", "Senior Manager", "Director", "Vice President",
    "Executive", "Owner", "Founder", "Partner",
]

DEPARTMENT_OPTIONS = [
    "Sales", "Marketing", "Operations", "Business Development", "Customer Success",
    "Procurement", "Supply Chain", "Logistics", "Events", "Human Resources", "Finance",
    "Accounting", "Legal", "IT", "Technology", "Product", "Engineering", "Design",
    "Customer Service", "Support", "Administration", "Executive", "Management", "Strategy",
    "Planning", "Quality Assurance", "Research & Development", "Manufacturing", "Production",
    "Facilities", "Security", "Compliance", "Risk Management",
]

COMMUNICATION_STYLES = [
    "Professional and formal", "Warm and friendly", "Casual and conversational",
    "Direct and to-the-point", "Enthusiastic and energetic", "Consultative and advisory",
    "Empathetic and understanding", "Confident and authoritative", "Helpful and supportive",
    "Humorous and light-hearted", "Technical and detailed", "Simple and clear",
    "Personal and relatable", "Inspiring and motivational",
]

COMPANY_SIZE_PRESETS = [
    {"employees": 10, "label": "1-10 employees (Startup)"},
    {"employees": 25, "label": "11-25 employees (Small)"},
    {"employees": 50, "label": "26-50 employees (Small)"},
    {"employees": 100, "label": "51-100 employees (Medium)"},
    {"employees": 250, "label": "101-250 employees (Medium)"},
    {"employees": 500, "label": "251-500 employees (Large)"},
    {"employees": 1000, "label": "501-1000 employees (Large)"},
    {"employees": 2500, "label": "1001-2500 employees (Enterprise)"},
    {"employees": 5000, "label": "2501-5000 employees (Enterprise)"},
    {"employees": 10000, "label": "5000+ employees (Enterprise)"},
]


def editor_options() -> Dict[str, object]:
    return {
        "industries": INDUSTRY_OPTIONS,
        "geography": GEOGRAPHY_OPTIONS,
        "geography_grouped": GEOGRAPHY_OPTIONS_GROUPED,
        "job_titles": JOB_TITLE_OPTIONS,
        "departments": DEPARTMENT_OPTIONS,
        "communication_styles": COMMUNICATION_STYLES,
        "company_sizes": COMPANY_SIZE_PRESETS,
    }
