from pydantic import ValidationError
import pytest

from yambib.core.config import LoadOptions, resolve_options


def test_defaults_keep_lenient_behaviour() -> None:
    options = LoadOptions()
    assert options.inherit_parent_key is True
    assert options.strict_entry_types is False
    assert options.parent_key("ref") == "ref"
    assert options.parent_key("ref", 2) == "ref"


def test_distinct_parent_keys() -> None:
    options = LoadOptions(inherit_parent_key=False)
    assert options.parent_key("ref") == "ref/parent"
    assert options.parent_key("ref", 1) == "ref/parent/1"


def test_resolve_options() -> None:
    assert resolve_options(None) == LoadOptions()
    options = LoadOptions(strict_entry_types=True)
    assert resolve_options(options) is options
    assert resolve_options({"strict_entry_types": True}) == options


def test_unknown_option_is_rejected() -> None:
    with pytest.raises(ValidationError):
        resolve_options({"strict": True})


def test_options_are_frozen() -> None:
    options = LoadOptions()
    with pytest.raises(ValidationError):
        options.strict_entry_types = True
