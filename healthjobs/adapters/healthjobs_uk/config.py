"""
HealthJobsUK constants.
"""

SOURCE_NAME = "HealthJobsUK"
CACHE_SOURCE = "healthjobs-uk"
ID_PREFIX = "hjuk_"

BASE_URL = "https://www.healthjobsuk.com"
