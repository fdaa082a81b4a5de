"""
Tests for the Sphinx sources under docs/.
"""

import importlib
import re
import runpy
from pathlib import Path

import pytest

DOCS = Path(__file__).resolve().parents[2] / "docs"
DIRECTIVE = re.compile(r"^\.\. automodule:: (\S+)(?:\n\s+:members:(.*))?", re.MULTILINE)


def _automodules():
    text = (DOCS / "index.rst").read_text()
    return [
        (module, [m.strip() for m in (members or "").split(",") if m.strip()])
        for module, members in DIRECTIVE.findall(text)
    ]


def test_conf_loads():
    conf = runpy.run_path(str(DOCS / "conf.py"))
    assert conf["project"] == "PyEconometrics"
    assert "sphinx.ext.napoleon" in conf["extensions"]
    import pyeconometrics
    assert conf["release"] == pyeconometrics.__version__


@pytest.mark.parametrize("module,members", _automodules())
def test_documented_names_exist(module, members):
    mod = importlib.import_module(module)
    for name in members:
        assert hasattr(mod, name), f"{module} has no {name}"
