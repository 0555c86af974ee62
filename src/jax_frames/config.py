"""Runtime configuration for jax_frames.

Options are read as attributes and changed with ``update``, the same way
``jax.config`` is used::

    import jax_frames
    jax_frames.config.update("check_finite", True)

Defaults can be set through environment variables named ``JAX_FRAMES_<OPTION>``.
Values passed to ``update`` must already have the option's type; environment
strings such as "1", "true" or "off" are parsed once at start-up.
"""

import contextlib
import logging
import os

from pydantic import BaseModel, ConfigDict, TypeAdapter

logger = logging.getLogger(__name__)

ENV_PREFIX = "JAX_FRAMES_"


class Options(BaseModel):
    """Validated option values.

    Attributes:
        check_finite: reject NaN/inf coordinates when building points,
            Lie algebra points and transforms from concrete arrays.
    """
    model_config = ConfigDict(strict=True, extra="forbid", validate_assignment=True)

    check_finite: bool = False

    @classmethod
    def from_environ(cls, environ=None) -> "Options":
        """Options with defaults overridden by ``JAX_FRAMES_*`` variables.

        Raises:
            pydantic.ValidationError: if a variable does not parse as its option's type
        """
        environ = os.environ if environ is None else environ
        values = {}
        for name, field in cls.model_fields.items():
            raw = environ.get(ENV_PREFIX + name.upper())
            if raw is not None:
                values[name] = TypeAdapter(field.annotation).validate_python(raw.strip())
        return cls(**values)


class Config:
    """Holder for the package options; see ``Options`` for the list."""

    def __init__(self):
        object.__setattr__(self, "_options", Options.from_environ())

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)
        return getattr(self._options, name)

    def __setattr__(self, name, value):
        raise AttributeError("use config.update(name, value) to change options")

    def update(self, name: str, value) -> None:
        """Set option ``name`` to ``value``.

        Raises:
            AttributeError: if ``name`` is not a known option
            pydantic.ValidationError: if ``value`` does not have the option's type
        """
        if name not in Options.model_fields:
            raise AttributeError(f"unrecognized config option: {name}")
        setattr(self._options, name, value)
        logger.debug("jax_frames config %s=%r", name, value)

    @contextlib.contextmanager
    def override(self, **values):
        """Temporarily set options inside a ``with`` block."""
        previous = self._options.model_copy()
        try:
            for name, value in values.items():
                self.update(name, value)
            yield self
        finally:
            object.__setattr__(self, "_options", previous)

    def __repr__(self):
        options = ", ".join(f"{name}={value!r}" for name, value in self._options)
        return f"Config({options})"


config = Config()
