import logging
from typing import Optional

import pytest
from slixmpp import JID

from parley import main
from parley.core import config
from parley.util.conf import ConfigModule


def test_get_parser(monkeypatch):
    class Config:
        REQUIRED: str
        REQUIRED__DOC = "some doc"
        REQUIRED__SHORT = "r"

        REQUIRED_INT: int
        REQUIRED_INT__DOC = "some doc"

        MULTIPLE: tuple[str, ...] = ()
        MULTIPLE__DOC = "some more doc"

        OPTIONAL: Optional[str] = None
        OPTIONAL__DOC = "not required"

        CHOICE: str = "all"
        CHOICE__DOC = "pick one"
        CHOICE__CHOICES = ("all", "none")

        SOME_BOOL = False
        SOME_BOOL__DOC = "a bool"

    monkeypatch.setattr(main, "config", Config)
    parser = main.get_parser()
    with pytest.raises(SystemExit) as e:
        parser.parse_known_args([])
    assert e.value.args[0] == 2

    args = parser.parse_args(["-r", "some_value", "--required-int", "45"])
    assert args.required == "some_value"
    assert args.required_int == 45
    assert args.multiple == tuple()
    assert args.optional is None
    assert args.choice == "all"
    assert not args.some_bool

    args = parser.parse_args(
        [
            "-r",
            "some_value",
            "--required-int",
            "45",
            "--multiple",
            "a",
            "b",
            "--optional",
            "prout",
            "--choice",
            "none",
            "--some-bool",
        ]
    )
    assert args.multiple == ["a", "b"]
    assert args.optional == "prout"
    assert args.choice == "none"
    assert args.some_bool

    with pytest.raises(SystemExit):
        parser.parse_args(
            ["-r", "some_value", "--required-int", "45", "--choice", "some"]
        )


def test_bool():
    class Config:
        SOME_BOOL = False
        SOME_BOOL__DOC = "a bool"

        TRUE = True
        TRUE__DOC = "true by default"

    configurator = ConfigModule(Config)

    configurator.set_conf([])
    assert not Config.SOME_BOOL
    assert Config.TRUE

    configurator.set_conf(["--some-bool"])
    assert Config.SOME_BOOL
    assert Config.TRUE

    configurator.set_conf(["--true"])
    assert not Config.SOME_BOOL
    assert Config.TRUE

    configurator.set_conf(["--true=false"])
    assert not Config.SOME_BOOL
    assert not Config.TRUE

    configurator.set_conf(["--true=true", "--some-bool=yes"])
    assert Config.SOME_BOOL
    assert Config.TRUE

    configurator.set_conf(["--some-bool=false"])
    assert not Config.SOME_BOOL


def test_env_var(monkeypatch):
    class Config:
        GONE_TIMEOUT = 10
        GONE_TIMEOUT__DOC = "minutes"

    monkeypatch.setenv("PARLEY_GONE_TIMEOUT", "3")
    ConfigModule(Config).set_conf([])
    assert Config.GONE_TIMEOUT == 3


def test_main_config(monkeypatch, tmp_path):
    for name in ("JID", "PASSWORD", "GONE_TIMEOUT", "LOG_FILE", "LOG_FORMAT"):
        monkeypatch.setattr(config, name, getattr(config, name, None), raising=False)
    # so that it falls back to the JID local part
    monkeypatch.delattr(config, "NICK")
    monkeypatch.setenv("PARLEY_CONF_DIR", str(tmp_path / "*.conf"))

    main.configure(
        [
            "--jid",
            "romeo@montague.lit",
            "--password",
            "juliet",
            "--autojoin",
            "balcony@conference.montague.lit",
            "--states=false",
            "--gone-timeout",
            "0",
        ]
    )
    assert config.JID == JID("romeo@montague.lit")
    assert config.NICK == "romeo"
    assert config.AUTOJOIN == [JID("balcony@conference.montague.lit")]
    assert not config.STATES
    assert config.GONE_TIMEOUT == 0
    assert logging.getLogger().level == logging.INFO


def test_main_config_explicit_nick(monkeypatch, tmp_path):
    for name in ("JID", "PASSWORD", "GONE_TIMEOUT", "LOG_FILE", "LOG_FORMAT"):
        monkeypatch.setattr(config, name, getattr(config, name, None), raising=False)
    monkeypatch.setenv("PARLEY_CONF_DIR", str(tmp_path / "*.conf"))

    main.configure(["-j", "romeo@montague.lit", "--password", "x", "--nick", "R"])
    assert config.NICK == "R"
