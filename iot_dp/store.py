"""Thread-safe in-memory store for device capabilities and state."""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager

from .models import DeviceCapabilities, NormalizedDeviceState


class DeviceStore:
    """Own the capability and state records of every device.

    Each device key has its own re-entrant lock so an operation on one device
    is atomic with respect to that device's records, while unrelated devices
    proceed independently. Whole-store operations take the guard lock.
    """

    def __init__(self) -> None:
        """Initialise empty capability and state tables."""

        self._capabilities: dict[str, DeviceCapabilities] = {}
        self._states: dict[str, NormalizedDeviceState] = {}
        self._locks: dict[str, threading.RLock] = {}
        self._guard = threading.RLock()

    def _lock_for(self, device_id: str) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(device_id)
            if lock is None:
                lock = self._locks[device_id] = threading.RLock()
            return lock

    def _read_lock(self, device_id: str) -> threading.RLock:
        # Unknown devices are read under the guard so lookups do not grow
        # the lock table.
        with self._guard:
            return self._locks.get(device_id, self._guard)

    @contextmanager
    def device_lock(self, device_id: str) -> Iterator[None]:
        """Hold the lock of ``device_id`` for the duration of the block."""

        lock = self._lock_for(device_id)
        with lock:
            yield

    def get_capabilities(self, device_id: str) -> DeviceCapabilities | None:
        """Return the capability record of ``device_id``."""

        with self._read_lock(device_id):
            return self._capabilities.get(device_id)

    def set_capabilities(self, capabilities: DeviceCapabilities) -> None:
        """Store ``capabilities``, replacing any earlier record."""

        with self.device_lock(capabilities.device_id), self._guard:
            self._capabilities[capabilities.device_id] = capabilities

    def all_capabilities(self) -> list[DeviceCapabilities]:
        """Return every capability record in first-registration order."""

        with self._guard:
            return list(self._capabilities.values())

    def get_state(self, device_id: str) -> NormalizedDeviceState | None:
        """Return a copy of the latest state of ``device_id``."""

        with self._read_lock(device_id):
            state = self._states.get(device_id)
            return state.model_copy(deep=True) if state is not None else None

    def set_state(self, state: NormalizedDeviceState) -> None:
        """Store ``state``, replacing the previous snapshot."""

        with self.device_lock(state.device_id), self._guard:
            self._states[state.device_id] = state

    def clear(self) -> None:
        """Drop every record and lock. Intended for tests and process resets."""

        with self._guard:
            self._capabilities.clear()
            self._states.clear()
            self._locks.clear()

    def __len__(self) -> int:
        """Return the number of devices with registered capabilities."""

        with self._guard:
            return len(self._capabilities)
