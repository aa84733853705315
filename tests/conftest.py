"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages,
and provides the sample module most tests inspect.
"""

import sys
from pathlib import Path
from typing import Any

import pytest

# Insert local src directory at the beginning of sys.path
# This ensures that the local typelens package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of typelens modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("typelens"):
        del sys.modules[module_name]

from typelens.config.runtime import RuntimeOptions, RuntimeOptionsStore  # noqa: E402
from typelens.mcp.context import AppContext  # noqa: E402
from typelens.mcp.response_cache import InMemoryResponseCache  # noqa: E402
from typelens.provider.memory import InMemoryProvider  # noqa: E402
from typelens.provider.models import RawModule  # noqa: E402

MODULE_PATH = "acme.widgets"

DEPRECATED = "Acme.DeprecatedAttribute"


def _method(name: str, returns: str = "System.Void", **extra: Any) -> dict[str, Any]:
    return {"kind": "method", "name": name, "type": returns, **extra}


# Widget declares 7 public, non-accessor methods; Close and Resize(double)
# carry the Deprecated attribute. Widget, Open and Resize(int, int) are documented.
SAMPLE_MODULE: dict[str, Any] = {
    "name": "Acme.Widgets",
    "version": "1.2.0",
    "types": [
        {
            "full_name": "Acme.Widgets.Component",
            "is_abstract": True,
            "attributes": ["System.SerializableAttribute"],
            "members": [
                _method(
                    "Render",
                    is_virtual=True,
                    is_abstract=True,
                    base_declaring_type="Acme.Widgets.Component",
                ),
                _method("Describe", "System.String"),
                {
                    "kind": "property",
                    "name": "Name",
                    "type": "System.String",
                    "can_read": True,
                    "can_write": True,
                },
                _method("get_Name", "System.String", is_special_name=True),
                _method(
                    "set_Name",
                    is_special_name=True,
                    parameters=[{"name": "value", "type": "System.String"}],
                ),
                {"kind": "constructor", "name": ".ctor", "accessibility": "protected"},
            ],
        },
        {
            "full_name": "Acme.Widgets.Widget",
            "base_type": "Acme.Widgets.Component",
            "docs": {
                "summary": "A resizable widget.\n\n  Owns its parts.  ",
                "remarks": "   ",
            },
            "interfaces": ["System.IDisposable"],
            "attributes": [
                {"type_name": "Acme.Widgets.ThemeAttribute", "constructor_arguments": ["dark"]}
            ],
            "members": [
                _method("Open", "System.Boolean", docs="Opens the widget."),
                _method("Close", attributes=[DEPRECATED]),
                _method(
                    "Resize",
                    parameters=[
                        {"name": "width", "type": "System.Int32"},
                        {"name": "height", "type": "System.Int32"},
                    ],
                    docs={
                        "summary": "Resizes the widget.",
                        "params": {"width": "New width.", "height": "New  height."},
                    },
                ),
                _method(
                    "Resize",
                    parameters=[
                        {
                            "name": "scale",
                            "type": "System.Double",
                            "is_optional": True,
                            "has_default": True,
                            "default_value": 1.5,
                        }
                    ],
                    attributes=[{"type_name": DEPRECATED, "constructor_arguments": ["use Scale"]}],
                ),
                _method("Dispose"),
                _method(
                    "TryGet",
                    "System.Boolean",
                    generic_parameters=[{"name": "T"}],
                    parameters=[
                        {"name": "key", "type": "System.String"},
                        {"name": "value", "type": "!T&", "is_out": True},
                    ],
                ),
                _method(
                    "Render",
                    is_virtual=True,
                    base_declaring_type="Acme.Widgets.Component",
                ),
                _method("Reset", accessibility="private"),
                _method("Describe", "System.String", declaring_type="Acme.Widgets.Component"),
                {
                    "kind": "property",
                    "name": "Size",
                    "type": "System.Int32",
                    "can_read": True,
                    "can_write": True,
                    "getter_accessibility": "public",
                    "setter_accessibility": "private",
                },
                _method("get_Size", "System.Int32", is_special_name=True),
                _method(
                    "set_Size",
                    is_special_name=True,
                    parameters=[{"name": "value", "type": "System.Int32"}],
                ),
                {
                    "kind": "property",
                    "name": "Item",
                    "type": "System.String",
                    "can_read": True,
                    "parameters": [{"name": "index", "type": "System.Int32"}],
                },
                {
                    "kind": "field",
                    "name": "MaxSize",
                    "type": "System.Int32",
                    "is_static": True,
                    "is_literal": True,
                    "constant_value": 4096,
                },
                {
                    "kind": "field",
                    "name": "Empty",
                    "type": "Acme.Widgets.Widget",
                    "is_static": True,
                    "is_init_only": True,
                },
                {
                    "kind": "field",
                    "name": "_size",
                    "type": "System.Int32",
                    "accessibility": "private",
                },
                {"kind": "event", "name": "Changed", "type": "System.EventHandler"},
                {"kind": "constructor", "name": ".ctor"},
                {
                    "kind": "constructor",
                    "name": ".ctor",
                    "parameters": [{"name": "name", "type": "System.String"}],
                },
                {
                    "kind": "constructor",
                    "name": ".cctor",
                    "accessibility": "private",
                    "is_static": True,
                },
            ],
            "nested_types": [
                {
                    "full_name": "Acme.Widgets.Widget+Part",
                    "kind": "struct",
                    "is_sealed": True,
                    "members": [{"kind": "field", "name": "Index", "type": "System.Int32"}],
                }
            ],
        },
        {
            "full_name": "Acme.Widgets.Box`1",
            "is_sealed": True,
            "is_generic_definition": True,
            "generic_parameters": [
                {"name": "T", "variance": "covariant", "reference_type_constraint": True}
            ],
            "members": [
                {"kind": "property", "name": "Value", "type": "!T", "can_read": True},
            ],
        },
        {"full_name": "Acme.Widgets.IRenderable", "kind": "interface", "is_abstract": True},
        {
            "full_name": "Acme.Widgets.Broken",
            "attributes": [{"type_name": "Missing.Attribute", "load_error": "assembly not found"}],
        },
        {
            "full_name": "Acme.Widgets.Internal.Helper",
            "accessibility": "internal",
            "is_abstract": True,
            "is_sealed": True,
        },
    ],
}


class FakeClock:
    """Monotonic clock the tests advance by hand."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def module_path() -> str:
    return MODULE_PATH


@pytest.fixture
def sample_module() -> RawModule:
    return RawModule.model_validate(SAMPLE_MODULE)


@pytest.fixture
def provider(sample_module: RawModule) -> InMemoryProvider:
    return InMemoryProvider({MODULE_PATH: sample_module})


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def app_ctx(provider: InMemoryProvider, clock: FakeClock) -> AppContext:
    """Context over the sample module with a hand-driven cache clock."""
    return AppContext(
        provider=provider,
        options=RuntimeOptionsStore(RuntimeOptions(cache_ttl_seconds=60)),
        cache=InMemoryResponseCache(clock=clock),
    )
