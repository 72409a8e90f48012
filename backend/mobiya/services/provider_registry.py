"""
Provider Registry
=================
Process-wide cache of optional detection providers.

Each provider is initialized at most once per registry. A provider that fails
to load (missing package, unexpected export shape, error while constructing)
is cached as unavailable and never retried for the lifetime of the registry.
"""

import logging
import threading
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)


class ProviderUnavailable(Exception):
    """Optional provider is missing, incompatible or failed to respond"""


class ProviderTimeout(ProviderUnavailable):
    """Provider call exceeded its time budget"""


class ProviderRegistry:
    """
    Write-once cache of provider handles keyed by provider name.

    Loading happens under a lock, so concurrent first use resolves to a single
    outcome: whichever initialization completes first is cached and every later
    caller reuses it. A loader interrupted before it returns leaves no entry
    behind, and the next caller performs the load again.
    """

    def __init__(self):
        self._handles: Dict[str, Optional[Any]] = {}
        self._lock = threading.Lock()

    def load(self, name: str, loader: Callable[[], Any]) -> Optional[Any]:
        """
        Return the cached handle for `name`, initializing it with `loader` on first use.

        Args:
            name: Provider key (usually the module name)
            loader: Zero-argument callable returning the provider handle

        Returns:
            The handle, or None when the provider is unavailable
        """
        if name in self._handles:
            return self._handles[name]

        with self._lock:
            if name in self._handles:
                return self._handles[name]

            try:
                handle = loader()
            except ImportError as e:
                logger.warning(f"Provider '{name}' not installed: {e}")
                handle = None
            except Exception as e:
                logger.warning(f"Provider '{name}' failed to initialize: {e}")
                handle = None

            self._handles[name] = handle
            if handle is not None:
                logger.info(f"Provider '{name}' loaded")
            return handle

    def is_loaded(self, name: str) -> bool:
        """True once `name` has been initialized, whatever the outcome"""
        return name in self._handles

    def status(self) -> Dict[str, bool]:
        """Availability of every provider initialized so far"""
        return {name: handle is not None for name, handle in self._handles.items()}


# Singleton instance
provider_registry = ProviderRegistry()
