from lightwaves.api.reveal import router as reveal_router
from lightwaves.api.root import router as root_router
from lightwaves.api.wallet import router as wallet_router

__all__ = [
    "reveal_router",
    "root_router",
    "wallet_router",
]
