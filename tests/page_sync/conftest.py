"""Shared fixtures for page-sync tests."""

from pathlib import Path

import pytest

from page_sync.config import CONFIG_ENV_VAR, ExtractorConfig
from page_sync.extractor import ReactExtractor
from page_sync.patcher import TargetPatcher
from page_sync.transform import CodeTransformer

REACT_PAGE = """\
'use client';

import React, { useState, useEffect, useCallback } from 'react';
import axios from 'axios';
import fallbackData from '../data/employees.json';

export default function Page() {
  const [employees, setEmployees] = useState([]);
  const [loading, setLoading] = useState(true);
  const [filter, setFilter] = useState('all');
  const [selectedEmployee, setSelectedEmployee] = useState(null);

  function organizeEmployeeData(list) {
    const byDepartment = {};
    list.forEach((employee) => {
      const key = employee.department || 'Unassigned';
      byDepartment[key] = byDepartment[key] || [];
      byDepartment[key].push(employee);
    });
    return byDepartment;
  }

  const getEmploymentStatus = (employee) => employee.active ? "Active" : "Inactive";

  const isManager = (employee) => {
    return employee.reports.length > 0;
  };

  const fetchEmployeeData = async () => {
    try {
      const response = await axios.get('/api/employees', { timeout: 5000 });
      setEmployees(response.data);
    } catch (error) {
      setEmployees(fallbackData);
    } finally {
      setLoading(false);
    }
  };

  const loadData = useCallback(async () => {
    if (process.env.NODE_ENV === 'development') {
      console.log('Loading employee data');
    }
    await fetchEmployeeData();
  }, []);

  const renderRow = (employee) => <li key={employee.id}>{employee.name}</li>;

  useEffect(() => {
    loadData();
  }, [loadData]);

  return (
    <main className="directory">
      {loading ? <p>Loading...</p> : <ul>{employees.map(renderRow)}</ul>}
    </main>
  );
}
"""

HTML_PAGE = """\
<!DOCTYPE html>
<html>
<body>
    <ul id="directory"></ul>
    <script>
        // Global state
        let employees = [{"id": 1, "name": "Sample"}];
        let loading = false;

        function isManager(employee) {
            return false;
        }

        function render() {
            document.getElementById('directory').innerHTML = '';
        }

        document.addEventListener('DOMContentLoaded', render);
    </script>
</body>
</html>
"""


@pytest.fixture(autouse=True)
def clear_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's PAGE_SYNC_CONFIG out of the tests."""
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)


@pytest.fixture
def extractor() -> ReactExtractor:
    """Extractor with the default allow-list."""
    return ReactExtractor(ExtractorConfig(), CodeTransformer())


@pytest.fixture
def patcher() -> TargetPatcher:
    """Patcher with the default anchors."""
    return TargetPatcher()


@pytest.fixture
def react_page() -> str:
    """A representative React page source."""
    return REACT_PAGE


@pytest.fixture
def html_page() -> str:
    """A standalone HTML mirror of the page."""
    return HTML_PAGE


@pytest.fixture
def sync_files(tmp_path: Path) -> tuple[Path, Path]:
    """Write the sample source and target into a temporary project."""
    source_path = tmp_path / "src" / "app" / "page.js"
    source_path.parent.mkdir(parents=True)
    source_path.write_text(REACT_PAGE, encoding="utf-8")

    target_path = tmp_path / "index.html"
    target_path.write_text(HTML_PAGE, encoding="utf-8")
    return source_path, target_path
