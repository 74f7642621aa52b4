import importlib
import pkgutil
from pathlib import Path

import pytest

API_DIR = Path(__file__).parent.parent


@pytest.mark.parametrize(
    "module_name", [name for _, name, _ in pkgutil.walk_packages([str(API_DIR)])]
)
def test_import_module(module_name):
    """Ensure every submodule in api/ can be imported without side-effects errors."""
    importlib.import_module(f"{module_name}")
