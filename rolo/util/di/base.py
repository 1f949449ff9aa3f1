"""Provider metadata shared by the container builders.

Infrastructure concerns (persistence, identity, notification) each have a
base provider with a production and a mock subclass. Everything else is a
single concrete provider.
"""

from typing import ClassVar, Literal

from dishka import Provider

Component = Literal["persistence", "identity", "notification"]


class ProviderBase(Provider):
    """Base for all DI providers.

    Attributes:
        __mock_component__: Component a mockable base stands for (None for
            concrete providers); inherited by its implementations
        __is_mock__: Whether an implementation is the mock one
    """

    __mock_component__: ClassVar[Component | None] = None
    __is_mock__: ClassVar[bool] = False

    @classmethod
    def implementation(cls, use_mock: bool) -> type["ProviderBase"]:
        """The class to instantiate for this registry entry.

        Raises:
            ValueError: If a mockable component lacks that kind of implementation
        """
        if cls.__mock_component__ is None:
            return cls

        for subclass in cls.__subclasses__():
            if subclass.__is_mock__ == use_mock:
                return subclass

        kind = "mock" if use_mock else "production"
        raise ValueError(f"No {kind} implementation for {cls.__mock_component__}")
