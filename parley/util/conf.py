import logging
from functools import cached_property
from types import GenericAlias
from typing import Optional, Union, get_args, get_origin, get_type_hints

import configargparse


class Option:
    """
    One upper-case attribute of a config object, and its ``__DOC``,
    ``__SHORT``, ``__CHOICES`` and ``__DYNAMIC_DEFAULT`` companions.
    """

    DOC_SUFFIX = "__DOC"
    DYNAMIC_DEFAULT_SUFFIX = "__DYNAMIC_DEFAULT"
    SHORT_SUFFIX = "__SHORT"
    CHOICES_SUFFIX = "__CHOICES"

    def __init__(self, parent: "ConfigModule", name: str):
        self.parent = parent
        self.config_obj = parent.config_obj
        self.name = name

    def __repr__(self):
        return f"<Option {self.name}>"

    @cached_property
    def doc(self) -> str:
        return getattr(self.config_obj, self.name + self.DOC_SUFFIX)

    @cached_property
    def required(self) -> bool:
        return not hasattr(
            self.config_obj, self.name + self.DYNAMIC_DEFAULT_SUFFIX
        ) and not hasattr(self.config_obj, self.name)

    @cached_property
    def default(self):
        return getattr(self.config_obj, self.name, None)

    @cached_property
    def short(self) -> Optional[str]:
        return getattr(self.config_obj, self.name + self.SHORT_SUFFIX, None)

    @cached_property
    def choices(self) -> Optional[tuple]:
        return getattr(self.config_obj, self.name + self.CHOICES_SUFFIX, None)

    @cached_property
    def _hint(self):
        return get_type_hints(self.config_obj).get(self.name, type(self.default))

    @cached_property
    def nargs(self):
        if isinstance(self._hint, GenericAlias):
            args = get_args(self._hint)
            if args[-1] is Ellipsis:
                return "*"
            return len(args)
        return None

    @cached_property
    def type(self):
        type_ = self._hint
        if _is_optional(type_):
            return get_args(type_)[0]
        if isinstance(type_, GenericAlias):
            return get_args(type_)[0]
        return type_

    @cached_property
    def names(self) -> list[str]:
        res = ["--" + self.name.lower().replace("_", "-")]
        if s := self.short:
            res.append("-" + s)
        return res

    @cached_property
    def kwargs(self) -> dict:
        kwargs = dict(
            required=self.required,
            help=self.doc,
            env_var=self.env_var,
        )
        if self.type is bool:
            kwargs["action"] = "store_false" if self.default else "store_true"
            return kwargs
        kwargs["type"] = self.type
        if not self.required:
            kwargs["default"] = self.default
        if self.choices:
            kwargs["choices"] = self.choices
        if n := self.nargs:
            kwargs["nargs"] = n
        return kwargs

    @property
    def env_var(self) -> str:
        return self.parent.ENV_VAR_PREFIX + self.name


class ConfigModule:
    """
    Turns a module (or class) of upper-case typed attributes into
    a :class:`configargparse.ArgumentParser`, and writes parsed values back
    onto it.
    """

    ENV_VAR_PREFIX = "PARLEY_"

    def __init__(
        self, config_obj, parser: Optional[configargparse.ArgumentParser] = None
    ):
        self.config_obj = config_obj
        if parser is None:
            parser = configargparse.ArgumentParser()
        self.parser = parser

        self.add_options_to_parser()

    def _list_options(self) -> set[str]:
        return {
            o
            for o in (set(dir(self.config_obj)) | set(get_type_hints(self.config_obj)))
            if o.upper() == o and not o.startswith("_") and "__" not in o
        }

    @cached_property
    def options(self) -> list[Option]:
        return [Option(self, name) for name in self._list_options()]

    def add_options_to_parser(self):
        p = self.parser
        for o in sorted(self.options, key=lambda x: (not x.required, x.name)):
            p.add_argument(*o.names, **o.kwargs)

    def set_conf(self, argv: Optional[list[str]] = None):
        if argv is not None:
            argv = self._normalize_bools(argv)
        args, rest = self.parser.parse_known_args(argv)
        self.update_dynamic_defaults(args)
        for name in self._list_options():
            value = getattr(args, name.lower())
            log.debug("Setting '%s' to %r", name, value)
            setattr(self.config_obj, name, value)
        return args, rest

    def _normalize_bools(self, argv: list[str]) -> list[str]:
        """
        Boolean options are flags that flip their default, but INI files and
        users write ``--some-bool=false``. Rewrite those to a bare flag, or
        to nothing when the value is the default.
        """
        bools = {o.name: o for o in self.options if o.type is bool}
        res = []
        for arg in argv:
            name, sep, value = arg.partition("=")
            opt = bools.get(_argv_to_option_name(name))
            if opt is None:
                res.append(arg)
                continue
            wanted = value.lower() in _TRUEISH if sep else True
            if wanted != bool(opt.default):
                res.append(name)
        if res != argv:
            log.debug("Rewrote boolean options from %s to %s", argv, res)
        return res

    def update_dynamic_defaults(self, args):
        pass


def _is_optional(t) -> bool:
    if get_origin(t) is Union:
        args = get_args(t)
        if len(args) == 2 and isinstance(None, args[1]):
            return True
    return False


def _argv_to_option_name(arg: str) -> str:
    return arg.upper().removeprefix("--").replace("-", "_")


_TRUEISH = {"true", "1", "on", "yes", "enabled"}


log = logging.getLogger(__name__)
