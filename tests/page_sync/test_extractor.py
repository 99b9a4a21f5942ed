"""Tests for ReactExtractor."""

import pytest

from page_sync.config import ExtractorConfig
from page_sync.errors import ParseError
from page_sync.events import EventKind, EventLog
from page_sync.extractor import ReactExtractor
from page_sync.models import FunctionKind


class TestExtractFunctions:
    """Test extraction of allow-listed functions."""

    def test_extracts_allow_listed_functions_in_order(self, extractor, react_page):
        """Test that every allow-listed function is found in discovery order."""
        result = extractor.extract(react_page)

        assert list(result.functions) == [
            "organizeEmployeeData",
            "getEmploymentStatus",
            "isManager",
            "fetchEmployeeData",
            "loadData",
        ]

    def test_ignores_names_outside_allow_list(self, extractor, react_page):
        """Test that other functions, including the component, are not extracted."""
        result = extractor.extract(react_page)

        assert "Page" not in result.functions
        assert "renderRow" not in result.functions

    def test_function_kinds(self, extractor, react_page):
        """Test the derivation recorded for each function."""
        functions = extractor.extract(react_page).functions

        assert functions["organizeEmployeeData"].kind is FunctionKind.PLAIN_FUNCTION
        assert functions["isManager"].kind is FunctionKind.ARROW_CONVERTED_FUNCTION
        assert functions["loadData"].kind is FunctionKind.HOOK_DERIVED_ASYNC_FUNCTION

    def test_nested_declaration_is_dedented(self, extractor, react_page):
        """Test that a declaration inside the component reads from column 0."""
        text = extractor.extract(react_page).functions["organizeEmployeeData"].generated_text

        assert text.startswith("function organizeEmployeeData(list) {\n  const byDepartment")
        assert text.endswith("\n  return byDepartment;\n}")

    def test_expression_arrow_gets_return_block(self, extractor, react_page):
        """Test that an expression-bodied arrow becomes a return statement."""
        record = extractor.extract(react_page).functions["getEmploymentStatus"]

        assert record.generated_text == (
            "function getEmploymentStatus(employee) "
            '{ return employee.active ? "Active" : "Inactive"; }'
        )
        assert record.parameter_names == ["employee"]

    def test_async_arrow_is_cleaned(self, extractor, react_page):
        """Test that an async arrow keeps async and has its idioms rewritten."""
        text = extractor.extract(react_page).functions["fetchEmployeeData"].generated_text

        assert text == (
            "async function fetchEmployeeData() {\n"
            "  try {\n"
            "    const response = await fetch('/api/employees').then(res => res.json());\n"
            "    employees = response.data;\n"
            "  } catch (error) {\n"
            "    employees = getFallbackData();\n"
            "  } finally {\n"
            "    loading = false;\n"
            "  }\n"
            "}"
        )

    def test_callback_becomes_async_function(self, extractor, react_page):
        """Test that a useCallback binding becomes an async declaration."""
        text = extractor.extract(react_page).functions["loadData"].generated_text

        assert text == (
            "async function loadData() {\n"
            "  if ((window.NODE_ENV || \"production\") === 'development') {\n"
            "    console.log('Loading employee data');\n"
            "  }\n"
            "  await fetchEmployeeData();\n"
            "}"
        )

    def test_non_async_callback_is_still_async(self, extractor):
        """Test that hook-derived functions are always async."""
        source = "const loadData = useCallback(() => { refresh(); }, []);"

        record = extractor.extract(source).functions["loadData"]

        assert record.generated_text == "async function loadData() { refresh(); }"

    def test_non_async_arrow_stays_synchronous(self, extractor):
        """Test that plain arrows do not gain async."""
        record = extractor.extract("const isManager = (e) => e.reports > 0;").functions[
            "isManager"
        ]

        assert record.generated_text == "function isManager(e) { return e.reports > 0; }"

    def test_function_expression_binding(self, extractor):
        """Test that a function expression bound to a name is converted."""
        record = extractor.extract(
            "const isManager = function (employee) { return true; };"
        ).functions["isManager"]

        assert record.kind is FunctionKind.ARROW_CONVERTED_FUNCTION
        assert record.generated_text == "function isManager(employee) { return true; }"

    def test_pattern_parameters_are_named_param(self, extractor):
        """Test that destructured parameters render as param."""
        record = extractor.extract(
            "const isManager = ({ reports }, level = 1) => reports.length > level;"
        ).functions["isManager"]

        assert record.parameter_names == ["param", "level"]
        assert record.generated_text.startswith("function isManager(param, level) {")

    def test_single_bare_parameter(self, extractor):
        """Test an arrow whose only parameter has no parentheses."""
        record = extractor.extract("const isManager = e => e.manager;").functions[
            "isManager"
        ]

        assert record.generated_text == "function isManager(e) { return e.manager; }"

    def test_later_definition_replaces_earlier(self, extractor):
        """Test that redefining a name keeps one record at the first position."""
        source = """
function loadData() { return 1; }
function isManager(e) { return false; }
const loadData = async () => { return 2; };
"""
        functions = extractor.extract(source).functions

        assert list(functions) == ["loadData", "isManager"]
        assert functions["loadData"].kind is FunctionKind.ARROW_CONVERTED_FUNCTION
        assert "return 2;" in functions["loadData"].generated_text

    def test_custom_allow_list(self):
        """Test that only configured names are extracted."""
        extractor = ReactExtractor(ExtractorConfig(target_functions=frozenset({"helper"})))

        functions = extractor.extract(
            "function helper() {}\nfunction isManager() {}"
        ).functions

        assert list(functions) == ["helper"]

    def test_empty_source(self, extractor):
        """Test that an empty file yields an empty result."""
        result = extractor.extract("")

        assert result.functions == {}
        assert result.state == []
        assert result.logic == []
        assert result.warnings == []


class TestExtractState:
    """Test extraction of state declarations."""

    def test_extracts_state_in_order(self, extractor, react_page):
        """Test every useState declaration with its serialised initial value."""
        state = extractor.extract(react_page).state

        assert [(s.reader_name, s.writer_name, s.initial_value_literal) for s in state] == [
            ("employees", "setEmployees", "[]"),
            ("loading", "setLoading", "true"),
            ("filter", "setFilter", '"all"'),
            ("selectedEmployee", "setSelectedEmployee", "null"),
        ]

    def test_state_generated_text(self, extractor):
        """Test the plain-JavaScript rendering of a state record."""
        state = extractor.extract("const [count, setCount] = useState(0);").state

        assert state[0].generated_text == (
            "let count = 0;\nfunction setCount(newValue) { count = newValue; }"
        )

    @pytest.mark.parametrize(
        "source",
        [
            "const [count] = useState(0);",
            "const [count, setCount, extra] = useState(0);",
            "const [{ a }, setA] = useState({});",
            "const state = useState(0);",
            "const [count, setCount] = useState(0, 1);",
            "const [count, setCount] = React.useState(0);",
        ],
        ids=[
            "one-element",
            "three-elements",
            "nested-pattern",
            "no-pattern",
            "two-arguments",
            "member-callee",
        ],
    )
    def test_ignores_non_conforming_declarations(self, extractor, source: str) -> None:
        """Test that only [reader, writer] = useState(value) is recognised."""
        assert extractor.extract(source).state == []


class TestExtractLogic:
    """Test extraction of effects."""

    def test_extracts_effect_with_dependencies(self, extractor, react_page):
        """Test that the effect body and its dependencies are recorded."""
        logic = extractor.extract(react_page).logic

        assert len(logic) == 1
        assert logic[0].kind == "effect"
        assert logic[0].dependency_names == ["loadData"]
        assert "loadData();" in logic[0].generated_text

    def test_effect_without_arguments_is_ignored(self, extractor):
        """Test that useEffect() with nothing to run is skipped."""
        assert extractor.extract("useEffect();").logic == []


class TestWarningsAndEvents:
    """Test recoverable problems and confirmation events."""

    def test_callback_without_function_argument_warns(self, extractor):
        """Test that a useCallback wrapping a reference is reported, not extracted."""
        result = extractor.extract("const x = 1;\nconst loadData = useCallback(handler, []);")

        assert "loadData" not in result.functions
        assert result.warnings == [
            "useCallback for loadData at line 2 has no function argument"
        ]

    def test_callback_without_arguments_warns(self, extractor):
        """Test that an empty useCallback() is reported, not extracted."""
        result = extractor.extract("const loadData = useCallback();")

        assert result.functions == {}
        assert result.warnings == [
            "useCallback for loadData at line 1 has no function argument"
        ]

    @pytest.mark.parametrize(
        "source",
        [
            "let isManager;",
            "const { isManager } = helpers;",
            "const [loadData] = [() => 1];",
            "const { loadData } = useCallback(() => 1, []);",
        ],
        ids=["no-value", "object-pattern", "array-pattern", "callback-pattern"],
    )
    def test_unnamed_bindings_are_ignored(self, extractor, source: str) -> None:
        """Test that declarators without a plain name extract nothing."""
        result = extractor.extract(source)

        assert result.functions == {}
        assert result.warnings == []

    def test_events_in_discovery_order(self, extractor, react_page):
        """Test that each extracted construct emits one event."""
        events = EventLog()

        extractor.extract(react_page, events)

        assert [(e.kind, e.name) for e in events.events] == [
            (EventKind.STATE_EXTRACTED, "employees"),
            (EventKind.STATE_EXTRACTED, "loading"),
            (EventKind.STATE_EXTRACTED, "filter"),
            (EventKind.STATE_EXTRACTED, "selectedEmployee"),
            (EventKind.FUNCTION_EXTRACTED, "organizeEmployeeData"),
            (EventKind.ARROW_FUNCTION_EXTRACTED, "getEmploymentStatus"),
            (EventKind.ARROW_FUNCTION_EXTRACTED, "isManager"),
            (EventKind.ARROW_FUNCTION_EXTRACTED, "fetchEmployeeData"),
            (EventKind.CALLBACK_EXTRACTED, "loadData"),
            (EventKind.EFFECT_EXTRACTED, "useEffect"),
        ]

    def test_parse_error_propagates(self, extractor):
        """Test that unparseable source raises ParseError."""
        with pytest.raises(ParseError):
            extractor.extract("const loadData = useCallback(async () => {")
