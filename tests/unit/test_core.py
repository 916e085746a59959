"""Tests for the service registry."""

import os
import subprocess
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from eduregistry.core.core import Services

SRC_DIR = Path(__file__).resolve().parents[2] / "src"

SERVICE_MODULES = [
    "eduregistry.core.modules.access.service",
    "eduregistry.core.modules.admin.service",
    "eduregistry.core.modules.auth.service",
    "eduregistry.core.modules.counter.service",
    "eduregistry.core.modules.country.service",
    "eduregistry.core.modules.individual.service",
    "eduregistry.core.modules.parent.service",
    "eduregistry.core.modules.school.service",
    "eduregistry.core.modules.student.service",
]


class TestServiceImports:
    """Tests that service modules load without importing the core first."""

    @pytest.mark.parametrize("module_path", SERVICE_MODULES)
    def test_service_module_imports_first(self, module_path):
        """Test that a fresh interpreter can import a service module before eduregistry.core.core."""
        env = {**os.environ, "PYTHONPATH": os.pathsep.join(filter(None, [str(SRC_DIR), os.environ.get("PYTHONPATH")]))}
        result = subprocess.run(
            [sys.executable, "-c", f"import {module_path}"],
            capture_output=True,
            text=True,
            env=env,
            check=False,
        )
        assert result.returncode == 0, result.stderr


class TestServices:
    """Tests for service registration."""

    def test_registry_builds_every_service(self):
        """Test that Services instantiates each configured service."""
        services = Services(MagicMock())
        assert type(services.counter).__name__ == "CounterService"
        assert type(services.admin).__name__ == "AdminService"
        assert type(services.country).__name__ == "CountryService"
