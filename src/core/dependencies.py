from fastapi import Request

from core.geocoding.base import Geocoder


def get_request_geocoder(request: Request) -> Geocoder:
    return request.app.state.geocoder
