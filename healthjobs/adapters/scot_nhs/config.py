"""
NHS Scotland constants.
"""

SOURCE_NAME = "NHS Scotland"
CACHE_SOURCE = "scot-nhs"
ID_PREFIX = "scot_"

BASE_URL = "https://apply.jobs.scot.nhs.uk"
LISTING_URL = f"{BASE_URL}/Home/Job"
DETAIL_URL = f"{BASE_URL}/Job/JobDetail?JobId={{job_id}}"

DEFAULT_EMPLOYER = "NHS Scotland"
