"""
All CSS selectors used by the NHS Scotland adapter.
Centralized here so that selector changes only need to happen in one place.
"""

# --- Listing page ---

JOB_CARD_SELECTOR = "div.card-body.p-20"
CARD_LINK_SELECTOR = "div.job-row__details a"

CARD_FIELDS = {
    "title": "div.job-row__details a",
    "reference": ".jobreference",
    "salary": ".salary",
    "close_date": ".closingdate",
    "job_family": ".department",
    "location": ".location",
    "employment_type": ".employmenttype",
    "hours_per_week": ".hours",
    "post_date": ".livedate",
    "employer": ".school",
    "department": ".shift",
}

# Visible labels prefixed to the card text
CARD_LABELS = {
    "reference": "Job reference:",
    "salary": "Salary:",
    "close_date": "Closing date:",
    "job_family": "Job Family:",
    "location": "Location:",
    "employment_type": "Employment type:",
    "hours_per_week": "Hours per week:",
    "post_date": "Live date:",
    "employer": "Employer (NHS Board):",
    "department": "Department:",
}

# --- Job detail page (primary selector first) ---

DETAIL_READY_SELECTOR = "h1, .jobreference"

DETAIL_TITLE_SELECTORS = ["h1", ".job-title"]
DETAIL_REFERENCE_SELECTORS = ['[data-testid="span-reference"]', ".jobreference"]
DETAIL_SALARY_SELECTORS = ['[data-testid="span-salary"]', ".salary"]
DETAIL_CLOSE_DATE_SELECTORS = ['[data-testid="div-vacancies-close-date"] span', ".closingdate"]
DETAIL_JOB_FAMILY_SELECTORS = ['[data-testid="span-vacancies-department"]', ".department"]
DETAIL_LOCATION_SELECTORS = ['[data-testid="span-vacancies-location-name"]', ".location"]
DETAIL_EMPLOYMENT_TYPE_SELECTORS = [
    '[data-testid="span-vacancies-employment-type"]',
    ".employmenttype",
]
DETAIL_HOURS_SELECTORS = ['[data-testid="span-sub-vacancies-hours"]', ".hours"]
DETAIL_POST_DATE_SELECTORS = ['[data-testid="div-vacancies-live-date"] span', ".livedate"]
DETAIL_EMPLOYER_SELECTORS = ['[data-testid="span-vacancies-school"]', ".school"]
DETAIL_DEPARTMENT_SELECTORS = ['[data-testid="span-vacancies-shift-pattern"]', ".shift"]

# Rich description table first, plain text block as the fallback
DETAIL_DESCRIPTION_HTML_SELECTOR = ".Table.cke_show_border td"
DETAIL_DESCRIPTION_TEXT_SELECTOR = ".jt-opensans-regular"
