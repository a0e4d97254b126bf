"""
NHS Jobs England constants.
"""

SOURCE_NAME = "NHS Jobs England"
CACHE_SOURCE = "nhs-jobs"

# Query-string names understood by the search_xml endpoint
QUERY_FIELDS = {
    "keyword": "keyword",
    "location": "location",
    "distance": "distance",
    "band": "payBandFilter",
    "contract_type": "contractType",
    "page": "page",
    "sort": "sort",
}

FEATURED_SORT = "salaryDesc"
