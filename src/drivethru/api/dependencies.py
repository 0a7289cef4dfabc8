"""
Accessors for per-application state.

The menu and delivery service are built once by ``create_app`` and kept
on ``app.state``; handlers only ever read them.
"""

from fastapi import Request

from drivethru.core.models import Menu
from drivethru.delivery import DeliveryService


def get_menu(request: Request) -> Menu:
    return request.app.state.menu


def get_delivery(request: Request) -> DeliveryService:
    return request.app.state.delivery
