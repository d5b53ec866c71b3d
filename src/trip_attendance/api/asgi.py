"""ASGI entrypoint for the trip attendance API."""

from trip_attendance.api.app import create_app
from trip_attendance.containers import build_container

app = create_app(build_container())
