"""Cart store — session-scoped access to carts.

Handlers never hold a process-wide cart: every read goes through
``CartStore.get(session_id)``, which returns the persisted cart or a fresh,
unsaved one when the session has none yet.
"""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from takeaway.cart.cart import SessionCart


class CartStore:
    """Repository-backed cart store."""

    @property
    def _repo(self):
        return current_domain.repository_for(SessionCart)

    def get(self, session_id) -> SessionCart:
        try:
            return self._repo.get(session_id)
        except ObjectNotFoundError:
            return SessionCart.create(session_id)

    def save(self, cart: SessionCart) -> None:
        self._repo.add(cart)

    def clear(self, session_id, reason="cleared") -> SessionCart:
        cart = self.get(session_id)
        cart.clear(reason=reason)
        self.save(cart)
        return cart


cart_store = CartStore()
