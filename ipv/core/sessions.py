# ipv/core/sessions.py
from fastapi import Request

from ipv.shared.checkout import CheckoutSessionRegistry

def get_checkout_sessions(request: Request) -> CheckoutSessionRegistry:
    """Registro de sesiones de cobro de la aplicación"""
    return request.app.state.checkout_sessions

def get_guest_stores(request: Request):
    """Registro de invitados de la aplicación (GuestStoreRegistry)"""
    return request.app.state.guest_stores
