"""Client-side optimistic view of the remaining quantity per allocation line.

A form that records a dispatch wants the "remaining" badges to drop as
soon as the user presses save, before the server answers. The view keeps
two layers instead of mutating a cached list:

- ``confirmed``: the last figures the server reported,
- ``pending``: deltas keyed by a token, one per in-flight request.

``remaining(line_id)`` is always ``confirmed - pending``. When the request
succeeds the token is confirmed (its delta folds into the confirmed layer,
or fresh server figures replace it); when it fails the token is reverted
and the display goes back to exactly what the server last said.

The view is never authoritative: the server re-checks everything.
"""

from __future__ import annotations

import itertools
from collections.abc import Callable, Iterable
from typing import TypeVar

from yard.application.dto import AllocationLineDTO
from yard.domain.exceptions import InsufficientRemainingError

T = TypeVar("T")


class OptimisticRemainingView:

    def __init__(self, lines: Iterable[AllocationLineDTO] = ()) -> None:
        self._confirmed: dict[int, int] = {}
        self._pending: dict[int, dict[int, int]] = {}
        self._tokens = itertools.count(1)
        self.load(lines)

    # --- Server figures -------------------------------------------------------

    def load(self, lines: Iterable[AllocationLineDTO]) -> None:
        """Adopt the server's remaining figures for the given lines."""
        for line in lines:
            self._confirmed[line.id] = line.remaining

    def remaining(self, line_id: int) -> int:
        consumed = sum(deltas.get(line_id, 0) for deltas in self._pending.values())
        return self._confirmed.get(line_id, 0) - consumed

    @property
    def pending_tokens(self) -> list[int]:
        return list(self._pending)

    # --- Two-phase update -----------------------------------------------------

    def begin(self, consumed: dict[int, int]) -> int:
        """Apply a local delta (units consumed per line) and return its token.

        Negative values give units back, e.g. when a dispatch is deleted.
        """
        for line_id, qty in consumed.items():
            if qty > self.remaining(line_id):
                raise InsufficientRemainingError(
                    f"Line #{line_id} shows only {self.remaining(line_id)} remaining"
                )
        token = next(self._tokens)
        self._pending[token] = dict(consumed)
        return token

    def confirm(self, token: int, lines: Iterable[AllocationLineDTO] | None = None) -> None:
        """The server accepted the change.

        With *lines*, the server's figures replace the local delta;
        without, the delta folds into the confirmed layer.
        """
        deltas = self._pending.pop(token)
        if lines is not None:
            self.load(lines)
            return
        for line_id, qty in deltas.items():
            self._confirmed[line_id] = self._confirmed.get(line_id, 0) - qty

    def revert(self, token: int) -> None:
        """The server rejected the change; drop the local delta."""
        self._pending.pop(token, None)

    def submit(self, consumed: dict[int, int], action: Callable[[], T]) -> T:
        """Run *action* between ``begin`` and ``confirm``/``revert``.

        Any failure reverts: a rejected rule and a lost connection leave
        the display exactly where the server left it.
        """
        token = self.begin(consumed)
        try:
            result = action()
        except Exception:
            self.revert(token)
            raise
        self.confirm(token)
        return result
