"""
All CSS selectors used by the HealthJobsUK adapter.
Centralized here so that selector changes only need to happen in one place.
"""

# --- Home page ---

CONSENT_BUTTON_SELECTOR = "button#onetrust-accept-btn-handler"

# Category list; the name lives in a styled span when present
CATEGORY_LINK_SELECTOR = "ul.list-group li a"
CATEGORY_NAME_SELECTOR = ".hj-css-sector-default-buttons"

# --- Category search form ---

SEARCH_FORM_SELECTOR = "#JobSearch"

# (select control, value) pairs. Each control is probed before it is set,
# layouts drift and some categories lack some filters.
SEARCH_FORM_FIELDS = [
    (r"#JobSearch\.d", ""),
    (r"#JobSearch\.g", ""),
    (r"#JobSearch\.re\.0", "1"),
    (r"#JobSearch\.re\.1", "1-_-_-"),
    (r"#JobSearch\.re\.2", "1-_-_--_-_-"),
]

SUBMIT_SELECTOR = r"#JobSearch\.Submit"

# --- Results pages ---

RESULTS_MARKER_SELECTOR = "li.hj-job, .hj-jobtitle"
JOB_CARD_SELECTOR = "li.hj-job"

CARD_FIELDS = {
    "title": ".hj-jobtitle",
    "employer": ".hj-employername",
    "location": ".hj-locationtown",
    "salary": ".hj-salary",
    "grade": ".hj-grade",
    "speciality": ".hj-primaryspeciality",
}
CARD_LINK_SELECTOR = "a"

NEXT_PAGE_SELECTOR = "a[rel='next'], .pagination a.next"

# --- Job detail page (primary selector first) ---

DETAIL_TITLE_SELECTORS = [".hj-jobtitle", "h1"]
DETAIL_EMPLOYER_SELECTORS = [".hj-employername", ".employer"]
DETAIL_LOCATION_SELECTORS = [".hj-locationtown", ".location"]
DETAIL_SALARY_SELECTORS = [".hj-salary", ".salary"]
DETAIL_GRADE_SELECTORS = [".hj-grade", ".grade"]
DETAIL_SPECIALITY_SELECTORS = [".hj-primaryspeciality", ".speciality"]
DETAIL_DESCRIPTION_SELECTORS = [".hj-jobdetails", ".job-description"]
