from enum import Enum


class MergeReason(str, Enum):
    NEIGHBORHOOD_PASS = "neighborhood_pass"
    COUNTRY_FALLBACK_PASS = "country_fallback_pass"
    DISTANCE_TOO_FAR = "distance_too_far"
    MULTI_CITY_FAIL = "multi_city_fail"
    GAP_TOO_LARGE = "gap_too_large"
    DIFFERENT_COUNTRY = "different_country"
    FIRST_DAY = "first_day"
