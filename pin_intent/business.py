"""Single access point to the business components of a node."""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

_log = logging.getLogger(__name__)


def _hook(component: Any, name: str) -> Optional[Callable[..., Any]]:
    method = getattr(component, name, None)
    return method if callable(method) else None


class BusinessLogic:
    """Holds the intent manager, validator, signer, processor, matcher and
    network manager, and starts and stops those that support it."""

    def __init__(
        self,
        intent_manager: Any,
        validator: Any,
        signer: Any,
        processor: Any,
        matcher: Any,
        network_manager: Any,
    ) -> None:
        self.intent_manager = intent_manager
        self.validator = validator
        self.signer = signer
        self.processor = processor
        self.matcher = matcher
        self.network_manager = network_manager

    def _lifecycle_components(self) -> tuple[tuple[str, Any], ...]:
        return (
            ("intent manager", self.intent_manager),
            ("processor", self.processor),
            ("network manager", self.network_manager),
        )

    def start(self) -> None:
        """Start each component that has a start method; the first failure propagates."""
        _log.info("Starting business logic components")
        for _, component in self._lifecycle_components():
            starter = _hook(component, "start")
            if starter is not None:
                starter()
        _log.info("Business logic components started successfully")

    def stop(self) -> None:
        """Stop each component that has a stop method; failures are logged, not raised."""
        _log.info("Stopping business logic components")
        for label, component in self._lifecycle_components():
            stopper = _hook(component, "stop")
            if stopper is None:
                continue
            try:
                stopper()
            except Exception:
                _log.exception("Failed to stop %s", label)
        _log.info("Business logic components stopped")

    def health_status(self) -> dict[str, Any]:
        """Return overall health with processor status and network metrics where available."""
        status: dict[str, Any] = {"status": "healthy"}
        processor_health = _hook(self.processor, "health_status")
        if processor_health is not None:
            status["processor"] = processor_health()
        network_metrics = _hook(self.network_manager, "metrics")
        if network_metrics is not None:
            status["network"] = network_metrics()
        return status