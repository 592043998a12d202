"""Base abstraction for page designs."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import BaseModel, ValidationError

from calbuilder.errors import ConfigurationError

if TYPE_CHECKING:
    from calbuilder.builder.base import BaseImageBuilder


class DesignBase(ABC):
    """
    Abstract base class for page designs.

    A design computes its layout with the layout engine and draws it through
    whichever image builder it is handed.
    """

    config_model: ClassVar[type[BaseModel]]
    """Pydantic model holding the design's configuration and its defaults."""

    def __init__(self, config: dict[str, Any] | None = None) -> None:
        """
        Initialize design with its default configuration.

        Args:
            config: Values overriding the defaults.
        """
        self.config = self.config_model()
        if config:
            self.configure(config)

    def configure(self, config: dict[str, Any]) -> None:
        """
        Merge configuration values over the current configuration.

        Args:
            config: Values to merge.

        Raises:
            ConfigurationError: If the merged configuration is invalid.
        """
        merged = {**self.config.model_dump(), **config}
        try:
            self.config = self.config_model.model_validate(merged)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid {type(self).__name__} configuration: {e}") from e

    @abstractmethod
    def do_init(self, builder: BaseImageBuilder) -> None:
        """
        Prepare sizes and colors before drawing.

        Args:
            builder: Builder of the current render.
        """
        pass

    @abstractmethod
    def do_build(self, builder: BaseImageBuilder) -> None:
        """
        Draw the page.

        Args:
            builder: Builder of the current render.
        """
        pass
