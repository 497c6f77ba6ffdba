from qt5_tools.errors import (
    BatchError,
    BranchStateError,
    CommandError,
    ConfigError,
    Qt5ToolError,
    WorkspaceError,
)


class TestQt5ToolError:
    def test_init_no_path(self):
        error = Qt5ToolError("test message")
        assert str(error) == "test message"
        assert error.path is None

    def test_init_with_path(self):
        error = ConfigError("bad key", "qt5_tool.yaml")
        assert str(error) == "[qt5_tool.yaml] bad key"
        assert error.path == "qt5_tool.yaml"

    def test_subclasses(self):
        assert issubclass(WorkspaceError, Qt5ToolError)
        assert issubclass(ConfigError, Qt5ToolError)


class TestCommandError:
    def test_init_with_returncode(self):
        error = CommandError("Pull failed", ["git", "pull"], 128)
        assert str(error) == "Pull failed (exit status 128)"
        assert error.command == ["git", "pull"]
        assert error.returncode == 128

    def test_init_without_command(self):
        error = CommandError("Command not found: jom")
        assert str(error) == "Command not found: jom"
        assert error.command is None
        assert error.returncode is None


class TestBranchStateError:
    def test_init(self):
        error = BranchStateError("Unable to determine branch of qtbase", "qtbase")
        assert str(error) == "Unable to determine branch of qtbase"
        assert error.module == "qtbase"


class TestBatchError:
    def test_init(self):
        error = BatchError("Pull", [("qtbase", "Pull qtbase failed"), ("qtsvg", "boom")])
        assert str(error) == "Pull failed for 2 module(s): qtbase, qtsvg"
        assert error.action == "Pull"
        assert error.failures == [("qtbase", "Pull qtbase failed"), ("qtsvg", "boom")]
