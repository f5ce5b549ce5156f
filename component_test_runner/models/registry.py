"""Registry of the components whose test suites are orchestrated."""

from collections.abc import Sequence
from dataclasses import dataclass

from component_test_runner.errors import ConfigurationError


@dataclass(frozen=True, kw_only=True)
class ComponentRegistry:
    """Ordered, immutable list of component identifiers.

    The registry is validated lazily by ``list()`` so that a bad configuration
    surfaces as a ``ConfigurationError`` at the start of a run rather than
    while the configuration is still being assembled.
    """

    components: Sequence[str]

    def __post_init__(self) -> None:
        # Freeze whatever sequence was supplied.
        object.__setattr__(self, "components", tuple(self.components))

    def list(self) -> Sequence[str]:
        """Return the component identifiers in registry order.

        Raises:
            ConfigurationError: If the registry is empty, or contains a blank
                or duplicate identifier

        """
        if not self.components:
            raise ConfigurationError("Component registry is empty: nothing to test")

        seen: set[str] = set()
        duplicates: list[str] = []
        for component in self.components:
            if not component.strip():
                raise ConfigurationError("Component registry contains a blank name")
            if component in seen and component not in duplicates:
                duplicates.append(component)
            seen.add(component)

        if duplicates:
            raise ConfigurationError(
                f"Component registry contains duplicates: {', '.join(duplicates)}"
            )

        return self.components

    def __len__(self) -> int:
        return len(self.components)
