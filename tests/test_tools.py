"""
Unit tests for the built-in tools.

Tools are exercised through Tool.run() so parameter validation is covered
too; error cases assert on the ToolError message sent to clients.
"""

import os
from collections import namedtuple
from unittest.mock import patch

import pytest

from tool_server.base import ExecutionError, ToolError, ValidationError
from tool_server.tools.calculator import CalculateTool
from tool_server.tools.echo import EchoTool
from tool_server.tools.filesystem import FileContentTool, ListDirTool, SearchFilesTool
from tool_server.tools.json_process import JsonProcessTool, apply_transformations, type_name
from tool_server.tools.system_info import SystemInfoTool


@pytest.fixture
def sample_dir(tmp_path):
    """Directory with two files and one subdirectory."""
    (tmp_path / "notes.txt").write_text("alpha", encoding="utf-8")
    (tmp_path / "report.md").write_text("beta", encoding="utf-8")
    (tmp_path / "notes_archive").mkdir()
    return tmp_path


class TestEcho:
    @pytest.mark.asyncio
    async def test_echo_returns_message(self):
        assert await EchoTool().run({"message": "Hello"}) == {"message": "Hello"}

    @pytest.mark.asyncio
    async def test_echo_preserves_non_string_message(self):
        assert await EchoTool().run({"message": {"nested": [1, 2]}}) == {"message": {"nested": [1, 2]}}

    @pytest.mark.asyncio
    async def test_echo_null_message(self):
        assert await EchoTool().run({"message": None}) == {"message": None}

    @pytest.mark.asyncio
    async def test_echo_missing_message(self):
        """An absent message is left out rather than reported as an error."""
        assert await EchoTool().run({}) == {}
        assert await EchoTool().run(None) == {}

    @pytest.mark.asyncio
    async def test_echo_empty_message(self):
        assert await EchoTool().run({"message": ""}) == {"message": ""}


class TestCalculate:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("operation, a, b, expected", [
        ("add", 2, 3, 5),
        ("subtract", 2, 3, -1),
        ("multiply", 4, 2.5, 10.0),
        ("divide", 1, 4, 0.25),
        ("divide", 6, 3, 2.0),
    ])
    async def test_operations(self, operation, a, b, expected):
        result = await CalculateTool().run({"operation": operation, "a": a, "b": b})
        assert result == {"result": expected}

    @pytest.mark.asyncio
    async def test_division_by_zero(self):
        with pytest.raises(ExecutionError, match="Division by zero"):
            await CalculateTool().run({"operation": "divide", "a": 1, "b": 0})

    @pytest.mark.asyncio
    async def test_invalid_operation(self):
        with pytest.raises(ExecutionError, match="Invalid operation"):
            await CalculateTool().run({"operation": "modulo", "a": 1, "b": 2})

    @pytest.mark.asyncio
    async def test_operands_must_be_numbers(self):
        with pytest.raises(ValidationError, match="Operands must be numbers"):
            await CalculateTool().run({"operation": "add", "a": "1", "b": 2})

        with pytest.raises(ValidationError, match="Operands must be numbers"):
            await CalculateTool().run({"operation": "add", "a": True, "b": 2})

    @pytest.mark.asyncio
    async def test_zero_operand_is_not_missing(self):
        assert await CalculateTool().run({"operation": "add", "a": 0, "b": 0}) == {"result": 0}


class TestListDir:
    @pytest.mark.asyncio
    async def test_lists_entries(self, sample_dir):
        result = await ListDirTool().run({"path": str(sample_dir)})

        items = {item["name"]: item["isDirectory"] for item in result["items"]}
        assert items == {"notes.txt": False, "report.md": False, "notes_archive": True}

    @pytest.mark.asyncio
    async def test_missing_directory(self, tmp_path):
        with pytest.raises(ExecutionError, match="^Failed to list directory: "):
            await ListDirTool().run({"path": str(tmp_path / "does-not-exist")})

    @pytest.mark.asyncio
    async def test_path_must_be_a_string(self):
        with pytest.raises(ValidationError, match="path must be a string"):
            await ListDirTool().run({"path": 0})

    @pytest.mark.asyncio
    async def test_path_is_a_file(self, sample_dir):
        with pytest.raises(ExecutionError, match="^Failed to list directory: "):
            await ListDirTool().run({"path": str(sample_dir / "notes.txt")})


class TestSearchFiles:
    @pytest.mark.asyncio
    async def test_substring_match(self, sample_dir):
        result = await SearchFilesTool().run({"path": str(sample_dir), "pattern": "notes"})

        matches = sorted(result["matches"], key=lambda m: m["name"])
        assert matches == [
            {
                "name": "notes.txt",
                "isDirectory": False,
                "path": os.path.join(str(sample_dir), "notes.txt"),
            },
            {
                "name": "notes_archive",
                "isDirectory": True,
                "path": os.path.join(str(sample_dir), "notes_archive"),
            },
        ]

    @pytest.mark.asyncio
    async def test_no_matches(self, sample_dir):
        result = await SearchFilesTool().run({"path": str(sample_dir), "pattern": "zzz"})
        assert result == {"matches": []}

    @pytest.mark.asyncio
    async def test_missing_directory(self, tmp_path):
        with pytest.raises(ExecutionError, match="^Failed to search files: "):
            await SearchFilesTool().run({"path": str(tmp_path / "gone"), "pattern": "x"})


class TestFileContent:
    @pytest.mark.asyncio
    async def test_write_then_read(self, tmp_path):
        target = tmp_path / "out.txt"
        tool = FileContentTool()

        written = await tool.run({"operation": "write", "path": str(target), "content": "héllo\nworld"})
        assert written == {"success": True}
        assert target.read_bytes() == "héllo\nworld".encode("utf-8")

        read = await tool.run({"operation": "read", "path": str(target)})
        assert read == {"content": "héllo\nworld"}

    @pytest.mark.asyncio
    async def test_write_empty_content(self, tmp_path):
        target = tmp_path / "empty.txt"

        result = await FileContentTool().run({"operation": "write", "path": str(target), "content": ""})

        assert result == {"success": True}
        assert target.read_text(encoding="utf-8") == ""

    @pytest.mark.asyncio
    async def test_write_without_content(self, tmp_path):
        with pytest.raises(ExecutionError) as exc_info:
            await FileContentTool().run({"operation": "write", "path": str(tmp_path / "x.txt")})

        assert exc_info.value.message == (
            "File operation failed: Invalid operation or missing content for write"
        )
        assert not (tmp_path / "x.txt").exists()

    @pytest.mark.asyncio
    async def test_unknown_operation(self, tmp_path):
        with pytest.raises(ExecutionError, match="Invalid operation or missing content for write"):
            await FileContentTool().run({"operation": "append", "path": str(tmp_path / "x.txt"), "content": "a"})

    @pytest.mark.asyncio
    async def test_read_missing_file(self, tmp_path):
        with pytest.raises(ExecutionError, match="^File operation failed: "):
            await FileContentTool().run({"operation": "read", "path": str(tmp_path / "nope.txt")})


class TestSystemInfo:
    @pytest.mark.asyncio
    async def test_snapshot_shape(self):
        result = await SystemInfoTool().run({})

        assert set(result) == {"cpu", "memory", "system"}
        assert set(result["cpu"]) == {"cores", "model", "speed"}
        assert set(result["memory"]) == {"total", "free", "used"}
        assert set(result["system"]) == {"platform", "arch", "uptime", "loadAverage"}
        assert result["cpu"]["cores"] >= 1
        assert result["memory"]["used"] == result["memory"]["total"] - result["memory"]["free"]
        assert len(result["system"]["loadAverage"]) == 3

    @pytest.mark.asyncio
    async def test_values_come_from_psutil(self):
        VirtualMemory = namedtuple("VirtualMemory", ["total", "available"])
        CpuFreq = namedtuple("CpuFreq", ["current", "min", "max"])

        with patch("tool_server.tools.system_info.psutil") as mock_psutil:
            mock_psutil.cpu_count.return_value = 8
            mock_psutil.cpu_freq.return_value = CpuFreq(2400.7, 800.0, 3600.0)
            mock_psutil.virtual_memory.return_value = VirtualMemory(16000, 6000)
            mock_psutil.boot_time.return_value = 0.0
            mock_psutil.getloadavg.return_value = (0.5, 0.25, 0.125)

            result = await SystemInfoTool().run({})

        assert result["cpu"]["cores"] == 8
        assert result["cpu"]["speed"] == 2400
        assert result["memory"] == {"total": 16000, "free": 6000, "used": 10000}
        assert result["system"]["loadAverage"] == [0.5, 0.25, 0.125]
        assert result["system"]["uptime"] > 0

    @pytest.mark.asyncio
    async def test_missing_cpu_frequency(self):
        with patch("tool_server.tools.system_info.psutil.cpu_freq", return_value=None):
            result = await SystemInfoTool().run({})

        assert result["cpu"]["speed"] == 0


class TestJsonValidate:
    @pytest.mark.asyncio
    async def test_matching_types(self):
        result = await JsonProcessTool().run({
            "operation": "validate",
            "data": {"name": "John", "age": 30},
            "schema": {"name": "string", "age": "number"},
        })
        assert result == {"isValid": True}

    @pytest.mark.asyncio
    async def test_mismatched_type(self):
        result = await JsonProcessTool().run({
            "operation": "validate",
            "data": {"name": "John", "age": "30"},
            "schema": {"name": "string", "age": "number"},
        })
        assert result == {"isValid": False}

    @pytest.mark.asyncio
    async def test_nested_schema_and_extra_keys(self):
        schema = {"user": {"name": "string", "active": "boolean", "tags": "object"}}
        data = {"user": {"name": "Ann", "active": False, "tags": [], "extra": 1}, "other": None}

        result = await JsonProcessTool().run({"operation": "validate", "data": data, "schema": schema})
        assert result == {"isValid": True}

    @pytest.mark.asyncio
    async def test_missing_sub_object(self):
        result = await JsonProcessTool().run({
            "operation": "validate",
            "data": {"name": "Ann"},
            "schema": {"address": {"city": "string"}},
        })
        assert result == {"isValid": False}

    @pytest.mark.asyncio
    async def test_missing_key_is_undefined(self):
        tool = JsonProcessTool()

        missing = await tool.run({
            "operation": "validate", "data": {}, "schema": {"nickname": "undefined"},
        })
        required = await tool.run({
            "operation": "validate", "data": {}, "schema": {"nickname": "string"},
        })

        assert missing == {"isValid": True}
        assert required == {"isValid": False}

    def test_type_names(self):
        assert type_name("x") == "string"
        assert type_name(1) == "number"
        assert type_name(1.5) == "number"
        assert type_name(True) == "boolean"
        assert type_name(None) == "object"
        assert type_name([]) == "object"
        assert type_name({}) == "object"

    @pytest.mark.asyncio
    async def test_validate_without_schema(self):
        with pytest.raises(ToolError, match="Invalid operation or missing required parameters"):
            await JsonProcessTool().run({"operation": "validate", "data": {"a": 1}})


class TestJsonTransform:
    @pytest.mark.asyncio
    async def test_rename(self):
        data = {"oldName": "John"}

        result = await JsonProcessTool().run({
            "operation": "transform",
            "data": data,
            "transformations": [{"operation": "rename", "path": "oldName", "newPath": "name"}],
        })

        assert result == {"result": {"name": "John"}}
        assert data == {"oldName": "John"}

    def test_result_is_a_deep_copy(self):
        data = {"user": {"profile": {"name": "John"}}}

        result = apply_transformations(
            data, [{"operation": "add", "path": "user.profile.age", "value": 30}]
        )

        assert result is not data
        assert result["user"] is not data["user"]
        assert result["user"]["profile"] is not data["user"]["profile"]
        assert data == {"user": {"profile": {"name": "John"}}}
        assert result == {"user": {"profile": {"name": "John", "age": 30}}}

    def test_transformations_apply_in_order(self):
        result = apply_transformations(
            {"a": 1},
            [
                {"operation": "rename", "path": "a", "newPath": "b"},
                {"operation": "add", "path": "c", "value": "new"},
                {"operation": "rename", "path": "b", "newPath": "d"},
                {"operation": "delete", "path": "c"},
            ],
        )
        assert result == {"d": 1}

    def test_nested_paths(self):
        result = apply_transformations(
            {"user": {"first": "Ann", "tmp": True}},
            [
                {"operation": "rename", "path": "user.first", "newPath": "firstName"},
                {"operation": "delete", "path": "user.tmp"},
                {"operation": "add", "path": "user.meta", "value": {"v": 1}},
            ],
        )
        assert result == {"user": {"firstName": "Ann", "meta": {"v": 1}}}

    def test_missing_intermediate_path_is_a_no_op(self):
        data = {"user": {"name": "Ann"}}

        result = apply_transformations(
            data, [{"operation": "add", "path": "account.settings.theme", "value": "dark"}]
        )

        assert result == data

    def test_rename_without_new_path_is_ignored(self):
        assert apply_transformations({"a": 1}, [{"operation": "rename", "path": "a"}]) == {"a": 1}

    def test_delete_missing_key(self):
        assert apply_transformations({"a": 1}, [{"operation": "delete", "path": "b"}]) == {"a": 1}

    def test_add_null_value(self):
        assert apply_transformations({}, [{"operation": "add", "path": "x", "value": None}]) == {"x": None}

    def test_list_index_segment(self):
        result = apply_transformations(
            {"items": [{"id": 1}, {"id": 2}]},
            [{"operation": "add", "path": "items.1.seen", "value": True}],
        )
        assert result == {"items": [{"id": 1}, {"id": 2, "seen": True}]}

    def test_unknown_transformation_operation_ignored(self):
        assert apply_transformations({"a": 1}, [{"operation": "upper", "path": "a"}]) == {"a": 1}

    def test_transformation_without_path(self):
        with pytest.raises(ValidationError):
            apply_transformations({"a": 1}, [{"operation": "delete"}])

    @pytest.mark.asyncio
    async def test_transform_without_transformations(self):
        with pytest.raises(ToolError, match="Invalid operation or missing required parameters"):
            await JsonProcessTool().run({"operation": "transform", "data": {"a": 1}})

    @pytest.mark.asyncio
    async def test_transformations_must_be_a_list(self):
        with pytest.raises(ValidationError, match="transformations must be an array"):
            await JsonProcessTool().run({
                "operation": "transform",
                "data": {"a": 1},
                "transformations": {"operation": "delete", "path": "a"},
            })
