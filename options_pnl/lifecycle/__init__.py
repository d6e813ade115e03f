"""Contract lifecycle: closing, expiring and active views."""
from .transitions import (
    CloseEvent,
    ExpireEvent,
    InvalidTransitionError,
    apply_transition,
    close_contract,
    expire_contract,
    find_contracts_past_expiration,
    get_active_contracts,
    get_expired_contracts,
    get_expiring_today,
    is_active,
)

__all__ = [
    'CloseEvent',
    'ExpireEvent',
    'InvalidTransitionError',
    'apply_transition',
    'close_contract',
    'expire_contract',
    'find_contracts_past_expiration',
    'get_active_contracts',
    'get_expired_contracts',
    'get_expiring_today',
    'is_active'
]
