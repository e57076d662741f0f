"""
Request dependencies shared by the API routers
"""
from fastapi import Depends, Request

from demo_app.services.state import AppState
from demo_app.services.tracing import Tracer

# Registered paths answer any of these methods
ANY_METHOD = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def get_app_state(request: Request) -> AppState:
    return request.app.state.demo


def get_tracer(request: Request) -> Tracer:
    return request.app.state.tracer


def count_request(state: AppState = Depends(get_app_state)) -> int:
    """Increment the process request counter for a counted endpoint"""
    return state.request_counter.increment()
