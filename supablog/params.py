"""Route parameter validation."""

import logging
from typing import Callable, Mapping

from .lifecycle import Subscription

logger = logging.getLogger(__name__)

ParamsListener = Callable[[dict, "str | None"], None]


class ParamsValidator:
    """Validate that a route supplied every expected parameter.

    The published view is ``validated`` (exactly the expected keys, all
    non-empty strings) and ``error``. Listeners are only notified when that
    view changes.
    """

    def __init__(self, expected: list[str]):
        """Initialize the validator.

        Args:
            expected: Parameter names the route must supply, in display order
        """
        self.expected = list(expected)
        self.validated: dict[str, str] = {}
        self.error: str | None = None
        self.refresh: str | None = None
        self._params: Mapping = {}
        self._listeners: list[ParamsListener] = []

    def subscribe(self, listener: ParamsListener) -> Subscription:
        """Register a listener called with (validated, error) on every change."""
        self._listeners.append(listener)
        return Subscription(lambda: self._listeners.remove(listener))

    def sync(self, params: Mapping, search_params: Mapping | None = None) -> dict[str, str]:
        """Record new route parameters and re-validate.

        Args:
            params: Route parameters (name -> value), read again by force_refresh
            search_params: Query string parameters; ``refresh`` is exposed as-is

        Returns:
            The published validated mapping
        """
        self._params = params
        self.refresh = (search_params or {}).get("refresh")
        self._revalidate()
        return self.validated

    def force_refresh(self) -> dict[str, str]:
        """Re-validate the recorded parameter source as it reads now."""
        self._revalidate()
        return self.validated

    def validate(self) -> dict[str, str]:
        """Derive the validated mapping from the recorded parameters.

        Raises:
            ValueError: If any expected parameter is missing or empty
        """
        validated = {}
        missing = []
        for name in self.expected:
            value = self._params.get(name)
            if isinstance(value, str) and value:
                validated[name] = value
            else:
                missing.append(name)

        if missing:
            raise ValueError(f"Missing required parameters: {', '.join(missing)}")
        return validated

    def _revalidate(self):
        try:
            result = self.validate()
        except ValueError as e:
            self._publish({}, str(e))
            return
        self._publish(result, None)

    def _publish(self, validated: dict[str, str], error: str | None):
        if validated == self.validated and error == self.error:
            return
        self.validated = validated
        self.error = error
        if error:
            logger.debug(error)
        for listener in list(self._listeners):
            listener(validated, error)
