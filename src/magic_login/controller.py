"""
Flow controller: typestate machine for the two-step magic-code login.

Phases: mounting -> awaiting-email-input -> submitting-email ->
awaiting-code-input -> submitting-code -> success.

Admission control is the phase itself: every intent checks the current phase
and returns without effect when it does not apply, so a phase that records a
request in flight (submitting-*) cannot start a second one.

Side effects are keyed to phase entry and fire once per change of the phase tag:
- mounting: read the persisted email, go to code or email input.
- awaiting-code-input (shared store only): re-write the persisted email.
- success: clear the persisted email, wait ``settle_delay``, redirect once.

With a store that supports ``subscribe`` (variant B), every change to the
persisted record forces the flow to the matching input phase, whichever
context made the change.
"""

from __future__ import annotations

import asyncio
import contextlib
import inspect
import logging
from typing import Any, Awaitable, Callable, Optional, Type, Union

from magic_login.auth import AuthService
from magic_login.errors import AuthError, InvalidCode, InvalidEmail, MagicLoginError, StorageError
from magic_login.models.auth import AuthResult
from magic_login.models.state import (
    AwaitingCodeInput,
    AwaitingEmailInput,
    FlowState,
    Mounting,
    PersistedRecord,
    SubmittingCode,
    SubmittingEmail,
    Success,
)
from magic_login.persistence.base import PersistenceAdapter, Unsubscribe, supports_subscription

logger = logging.getLogger(__name__)

DEFAULT_SETTLE_DELAY_S = 1.0

StateListener = Callable[[FlowState], None]
Redirect = Callable[[], Union[Awaitable[None], None]]


def mask_email(email: str) -> str:
    local, sep, domain = email.partition("@")
    if not sep:
        return "***"
    return f"{local[:1]}***@{domain}"


def _unmounted(phases: tuple[str, ...]) -> MagicLoginError:
    return MagicLoginError("unmounted", f"Flow unmounted while waiting for {', '.join(phases)}")


class FlowController:
    def __init__(
        self,
        auth: AuthService,
        store: PersistenceAdapter,
        redirect: Redirect,
        settle_delay: float = DEFAULT_SETTLE_DELAY_S,
    ):
        self._auth = auth
        self._store = store
        self._redirect = redirect
        self._settle_delay = settle_delay
        self._shared = supports_subscription(store)
        self._state: FlowState = Mounting()
        self._listeners: list[StateListener] = []
        self._waiters: set[asyncio.Event] = set()
        self._store_lock = asyncio.Lock()
        self._unsubscribe: Optional[Unsubscribe] = None
        self._redirect_task: Optional[asyncio.Task[None]] = None
        self._redirected = False
        self._mounted = False
        self._disposed = False

    # -- read side -----------------------------------------------------------

    @property
    def state(self) -> FlowState:
        return self._state

    @property
    def shared(self) -> bool:
        """Whether the store reports changes made by other contexts."""
        return self._shared

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def redirect_task(self) -> Optional[asyncio.Task[None]]:
        return self._redirect_task

    def add_listener(self, listener: StateListener) -> Callable[[], None]:
        """Observe state changes. Returns a cleanup function."""
        self._listeners.append(listener)

        def remove() -> None:
            try:
                self._listeners.remove(listener)
            except ValueError:
                pass

        return remove

    async def wait_for_phase(self, *phases: str, timeout: Optional[float] = None) -> FlowState:
        """Wait until one of ``phases`` is current and return that state.

        Raises ``MagicLoginError`` if the flow is unmounted first.
        """
        if self._state.phase in phases:
            return self._state
        if self._disposed:
            raise _unmounted(phases)

        reached = asyncio.Event()
        matched: list[FlowState] = []

        def on_change(state: FlowState) -> None:
            if state.phase in phases and not matched:
                matched.append(state)
                reached.set()

        remove = self.add_listener(on_change)
        self._waiters.add(reached)
        try:
            await asyncio.wait_for(reached.wait(), timeout=timeout)
        except asyncio.TimeoutError:
            raise TimeoutError(f"Timed out waiting for {', '.join(phases)} (at {self._state.phase})")
        finally:
            self._waiters.discard(reached)
            remove()
        if not matched:
            raise _unmounted(phases)
        return matched[0]

    # -- lifecycle -----------------------------------------------------------

    async def mount(self) -> FlowState:
        if self._mounted:
            return self._state
        self._mounted = True
        if self._shared:
            self._unsubscribe = self._store.subscribe(self._reconcile)  # type: ignore[union-attr]
        await self._on_enter(self._state)
        return self._state

    async def unmount(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        task = self._redirect_task
        if task is not None and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        self._listeners.clear()
        for waiter in list(self._waiters):
            waiter.set()

    async def __aenter__(self) -> FlowController:
        await self.mount()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.unmount()

    # -- intents -------------------------------------------------------------

    async def submit_email(self, email: str) -> None:
        if not self._accepts(AwaitingEmailInput):
            return

        pending = SubmittingEmail(email=email)
        await self._advance(pending)
        result = await self._call_auth(InvalidEmail, self._auth.request_code, email)

        if not result.ok:
            await self._complete(pending, AwaitingEmailInput(error=result.error))
            return
        if self._state is not pending or self._disposed:
            self._discard(AwaitingCodeInput(email=email))
            return
        await self._call_store("write", email)
        await self._complete(pending, AwaitingCodeInput(email=email))

    async def submit_code(self, code: str) -> None:
        if not self._accepts(AwaitingCodeInput):
            return

        email = self._state.email  # type: ignore[union-attr]
        pending = SubmittingCode(email=email, code=code)
        await self._advance(pending)
        result = await self._call_auth(InvalidCode, self._auth.verify_code, email, code)

        if result.ok:
            await self._complete(pending, Success())
        else:
            await self._complete(pending, AwaitingCodeInput(email=email, error=result.error))

    def clear_code_error(self) -> None:
        """Drop the code error as soon as the user types again. No I/O."""
        state = self._state
        if not self._accepts(AwaitingCodeInput) or state.error is None:  # type: ignore[union-attr]
            return
        self._apply(AwaitingCodeInput(email=state.email))  # type: ignore[union-attr]

    async def request_email_change(self) -> None:
        """The "wrong email?" escape from code input."""
        if not self._accepts(AwaitingCodeInput):
            return
        # Transition before the clear so a later write queues behind it.
        await self._advance(AwaitingEmailInput())
        await self._call_store("clear")

    # -- transitions ---------------------------------------------------------

    def _accepts(self, phase: Type[Any]) -> bool:
        return not self._disposed and isinstance(self._state, phase)

    def _apply(self, state: FlowState) -> bool:
        """Replace the state. Returns True when a new phase was entered."""
        old = self._state
        if state == old:
            return False
        self._state = state
        logger.debug(f"Flow {old.phase} -> {state.phase}")
        for listener in list(self._listeners):
            listener(state)
        return state.phase != old.phase

    async def _advance(self, state: FlowState) -> None:
        if self._apply(state):
            await self._on_enter(state)

    async def _complete(self, pending: FlowState, target: FlowState) -> None:
        """Apply an I/O completion, unless the flow has left ``pending`` since."""
        if self._state is not pending or self._disposed:
            self._discard(target)
            return
        await self._advance(target)

    def _discard(self, target: FlowState) -> None:
        if self._disposed:
            logger.debug(f"Dropping {target.phase} completion on unmounted flow")
        elif not self._matches(target):
            logger.warning(f"Discarding {target.phase} completion, flow moved to {self._state.phase}")

    def _matches(self, target: FlowState) -> bool:
        return (
            self._state.phase == target.phase
            and getattr(self._state, "email", None) == getattr(target, "email", None)
        )

    async def _on_enter(self, state: FlowState) -> None:
        if isinstance(state, Mounting):
            email = await self._call_store("read")
            if self._state is not state or self._disposed:
                return
            await self._advance(AwaitingCodeInput(email=email) if email else AwaitingEmailInput())
        elif isinstance(state, AwaitingCodeInput):
            if self._shared:
                self._rewrite_shared(state.email)
        elif isinstance(state, Success):
            self._redirect_task = asyncio.get_running_loop().create_task(self._finish())

    def _rewrite_shared(self, email: str) -> None:
        store = self._store
        try:
            if store.read() != email:  # type: ignore[comparison-overlap]
                store.write(email)
        except StorageError as e:
            logger.warning(f"Store rewrite failed: {e}")

    async def _finish(self) -> None:
        await self._call_store("clear")
        await asyncio.sleep(self._settle_delay)
        if self._disposed or self._redirected:
            return
        self._redirected = True
        logger.info("Login complete, redirecting home")
        result = self._redirect()
        if inspect.isawaitable(result):
            await result

    # -- external changes (variant B) ----------------------------------------

    def _reconcile(self, old: PersistedRecord, new: PersistedRecord) -> None:
        if self._disposed or isinstance(self._state, Success) or old == new:
            return
        if isinstance(self._state, SubmittingEmail) and new.email == self._state.email:
            # Write of the email being submitted; its completion takes the flow to code input.
            return
        if new.email is not None and old.email is None:
            target: FlowState = AwaitingCodeInput(email=new.email)
        else:
            target = AwaitingEmailInput()
        if self._matches(target):
            return
        logger.info(f"Persisted email changed elsewhere, forcing {target.phase} (was {self._state.phase})")
        if self._apply(target) and isinstance(target, AwaitingCodeInput):
            self._rewrite_shared(target.email)

    # -- I/O -----------------------------------------------------------------

    async def _call_auth(
        self,
        kind: Type[AuthError],
        call: Callable[..., Awaitable[AuthResult]],
        *args: str,
    ) -> AuthResult:
        try:
            return await call(*args)
        except MagicLoginError as e:
            logger.warning(f"Auth service call failed ({e.code}): {e}")
            return AuthResult.from_error(e if isinstance(e, kind) else kind())

    async def _call_store(self, op: str, *args: str) -> Optional[str]:
        """Run one store call; calls are serialized so a slow write cannot overtake a clear."""
        async with self._store_lock:
            try:
                result = getattr(self._store, op)(*args)
                if inspect.isawaitable(result):
                    result = await result
            except StorageError as e:
                logger.warning(f"Store {op} failed: {e}")
                return None
        if op == "write" and args:
            logger.debug(f"Persisted email {mask_email(args[0])}")
        return result
