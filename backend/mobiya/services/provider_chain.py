"""
Provider Chain
==============
Best-effort profanity and language detection over optional libraries.

Profanity providers are consulted in a fixed priority order:
1. General-purpose English filter (better_profanity, always installed)
2. Hindi/Hinglish-aware filter (glin_profanity, optional extra)
3. Alternate Hindi-only filter (profanity_hindi, probed if present)

A provider is only asked when every earlier one answered "clean" or was
unavailable; the first positive answer wins. Language identification uses
langdetect. Nothing raised by a provider leaves this module: missing, broken
and slow providers all read as "not detected".
"""

import asyncio
import importlib
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, List, Optional

from mobiya.config import settings
from mobiya.services.provider_registry import (
    ProviderRegistry,
    ProviderTimeout,
    ProviderUnavailable,
    provider_registry,
)

logger = logging.getLogger(__name__)

UNDETERMINED = "und"

# Export shapes probed on a profanity module, in order
INSTANCE_ATTRIBUTES = ("profanity", "filter", "default")
CLASS_ATTRIBUTES = ("Filter", "Profanity", "ProfanityFilter", "AllProfanity")
CHECK_METHODS = ("contains_profanity", "is_profane", "is_message_dirty", "check")


def _find_check(target: Any) -> Optional[Callable[[str], Any]]:
    """Return the first check method exposed by `target`, if any"""
    for method_name in CHECK_METHODS:
        method = getattr(target, method_name, None)
        if callable(method):
            return method
    return None


def _as_flag(result: Any) -> bool:
    """Interpret a provider answer; some providers return a report dict"""
    if isinstance(result, dict):
        for key in ("contains_profanity", "containsProfanity", "is_profane", "profane"):
            if key in result:
                return bool(result[key])
        return False
    return bool(result)


def resolve_profanity_check(module: Any) -> Callable[[str], bool]:
    """
    Adapt a profanity module to a `check(text) -> bool` callable.

    Probes, in order: a ready-made instance exported by the module, a filter
    class that can be built without arguments, then a module-level function.

    Raises:
        ProviderUnavailable: if none of the known shapes is present
    """
    for attr in INSTANCE_ATTRIBUTES:
        instance = getattr(module, attr, None)
        if instance is None or isinstance(instance, type):
            continue
        # better_profanity keeps its word list unloaded until asked
        loader = getattr(instance, "load_censor_words", None)
        if callable(loader):
            loader()
        check = _find_check(instance)
        if check is not None:
            return lambda text, check=check: _as_flag(check(text))

    for attr in CLASS_ATTRIBUTES:
        cls = getattr(module, attr, None)
        if not isinstance(cls, type):
            continue
        try:
            instance = cls()
        except TypeError:
            continue
        check = _find_check(instance)
        if check is not None:
            return lambda text, check=check: _as_flag(check(text))

    check = _find_check(module)
    if check is not None:
        return lambda text, check=check: _as_flag(check(text))

    raise ProviderUnavailable(f"unrecognised export shape in {getattr(module, '__name__', module)!r}")


class Detector(ABC):
    """
    One optional provider behind a uniform `detect(text)` call.

    The handle is created through the shared registry on first use, so a
    provider is imported and probed once per process.
    """

    def __init__(self, name: str, registry: ProviderRegistry, timeout: float):
        self.name = name
        self.registry = registry
        self.timeout = timeout

    @abstractmethod
    def build_handle(self) -> Any:
        """Import the provider and adapt it; raise on failure"""

    def handle(self) -> Optional[Any]:
        return self.registry.load(self.name, self.build_handle)

    @abstractmethod
    def run(self, handle: Any, text: str) -> Any:
        """Call the provider synchronously"""

    def _call(self, text: str) -> Any:
        handle = self.handle()
        if handle is None:
            raise ProviderUnavailable(self.name)
        return self.run(handle, text)

    async def detect(self, text: str) -> Any:
        """
        Run the provider in a worker thread under the configured timeout.

        Raises:
            ProviderUnavailable: missing/broken provider or any provider error
            ProviderTimeout: the call took longer than `timeout`
        """
        try:
            return await asyncio.wait_for(asyncio.to_thread(self._call, text), self.timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Provider '{self.name}' timed out after {self.timeout}s")
            raise ProviderTimeout(f"{self.name} timed out after {self.timeout}s")
        except ProviderUnavailable:
            raise
        except Exception as e:
            logger.warning(f"Provider '{self.name}' check failed: {e}")
            raise ProviderUnavailable(f"{self.name} failed: {e}") from e


class ProfanityDetector(Detector):
    """Adapts any supported profanity module shape to `detect(text) -> bool`"""

    def build_handle(self) -> Callable[[str], bool]:
        module = importlib.import_module(self.name)
        return resolve_profanity_check(module)

    def run(self, handle: Callable[[str], bool], text: str) -> bool:
        return handle(text)


class LanguageDetector(Detector):
    """langdetect wrapper returning an ISO 639-1 code or an empty string"""

    def build_handle(self) -> Callable[[str], str]:
        module = importlib.import_module(self.name)
        factory = getattr(module, "DetectorFactory", None)
        if factory is not None:
            # langdetect is non-deterministic unless seeded
            factory.seed = 0
        detect = getattr(module, "detect", None)
        if not callable(detect):
            raise ProviderUnavailable(f"{self.name} exposes no detect()")
        return detect

    def run(self, handle: Callable[[str], str], text: str) -> str:
        return handle(text) or ""


class ProviderChain:
    """
    Ordered profanity detectors plus a language detector.

    Args:
        profanity_detectors: Detectors in priority order
        language_detector: Optional language identification detector
    """

    def __init__(
        self,
        profanity_detectors: List[Detector],
        language_detector: Optional[Detector] = None
    ):
        self.profanity_detectors = profanity_detectors
        self.language_detector = language_detector

    @classmethod
    def from_settings(cls, registry: ProviderRegistry = provider_registry) -> "ProviderChain":
        timeout = settings.provider_timeout_seconds
        return cls(
            profanity_detectors=[
                ProfanityDetector(name, registry, timeout) for name in settings.profanity_providers
            ],
            language_detector=LanguageDetector(settings.language_provider, registry, timeout),
        )

    async def contains_profanity(self, text: str) -> bool:
        """
        Check `text` against each profanity provider until one flags it.

        Returns:
            True on the first positive answer, False if every provider was
            negative or unavailable
        """
        if not text or not text.strip():
            return False

        for detector in self.profanity_detectors:
            try:
                if await detector.detect(text):
                    logger.info(f"Profanity detected via {detector.name}: '{text[:50]}...'")
                    return True
            except ProviderUnavailable as e:
                logger.debug(f"Skipping profanity provider: {e}")

        return False

    async def detect_language(self, text: str) -> str:
        """
        Detect the language of `text`.

        Returns:
            The provider's language code, or 'und' for short input, missing
            provider, provider error or empty answer
        """
        if not text or len(text.strip()) < 3 or self.language_detector is None:
            return UNDETERMINED

        try:
            code = await self.language_detector.detect(text.strip())
        except ProviderUnavailable as e:
            logger.debug(f"Language detection skipped: {e}")
            return UNDETERMINED

        return code or UNDETERMINED

    def warm_up(self) -> None:
        """Initialize every provider handle ahead of the first request"""
        detectors = list(self.profanity_detectors)
        if self.language_detector is not None:
            detectors.append(self.language_detector)
        for detector in detectors:
            detector.handle()
