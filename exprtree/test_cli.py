import pytest

from exprtree.cli import MENU, Shell, main
from exprtree.config import Settings


class FakeConsole:
    """Scripted answers for Shell.ask and a record of everything printed."""

    def __init__(self, *answers):
        self.answers = list(answers)
        self.prompts = []
        self.lines = []

    def prompt(self, message):
        self.prompts.append(message)
        if not self.answers:
            raise EOFError()
        return self.answers.pop(0)

    def output(self, text):
        self.lines.append(text)


def make_shell(*answers, **settings):
    console = FakeConsole(*answers)
    return Shell(Settings(**settings), prompt=console.prompt, output=console.output), console


def test_evaluate_asks_for_each_variable_once():
    shell, console = make_shell("5", "2")
    assert shell.evaluate_expression("x*y + x")
    assert console.prompts == ["Enter value for x: ", "Enter value for y: "]
    assert console.lines[0] == "Expression Tree:"
    assert console.lines[-1] == "Result: 15.00"


def test_evaluate_reasks_on_non_numeric_value():
    shell, console = make_shell("abc", "5")
    assert shell.evaluate_expression("x+1")
    assert "Invalid input. Please enter a number." in console.lines
    assert console.lines[-1] == "Result: 6.00"


def test_evaluate_uses_given_values_without_prompting():
    shell, console = make_shell()
    assert shell.evaluate_expression("x+1", {"x": 2.0})
    assert console.prompts == []
    assert console.lines[-1] == "Result: 3.00"


def test_evaluate_reports_errors():
    shell, console = make_shell()
    assert not shell.evaluate_expression("1/0")
    assert console.lines[-1] == "Error: Division by zero"
    assert not shell.evaluate_expression("(1+2")
    assert console.lines[-1] == "Error: Mismatched parentheses"


def test_batch_appends_suffix(tmp_path):
    (tmp_path / "in.txt").write_text("2+2\nx\n", encoding="utf-8")
    shell, console = make_shell()
    assert shell.batch(str(tmp_path / "in"), str(tmp_path / "out"))
    assert (tmp_path / "out.txt").read_text(encoding="utf-8") == "2+2 = 4.00\nx = Error: Undefined variable: x\n"
    assert console.lines[-1].startswith("Batch processing completed.")


def test_batch_missing_input(tmp_path):
    shell, console = make_shell()
    assert not shell.batch(str(tmp_path / "missing"), str(tmp_path / "out"))
    assert console.lines[-1].startswith("Error: Batch processing failed")


def test_save_writes_dump_to_configured_tree_file(tmp_path):
    tree_file = tmp_path / "tree.txt"
    shell, console = make_shell(tree_file=str(tree_file))
    assert shell.save("1+2")
    assert tree_file.read_text(encoding="utf-8") == "+\n  1\n  2\n"
    assert console.lines[-1] == f"Expression tree saved to {tree_file}"


def test_save_rejects_malformed_expression(tmp_path):
    tree_file = tmp_path / "tree.txt"
    shell, console = make_shell(tree_file=str(tree_file))
    assert not shell.save("1+")
    assert not tree_file.exists()


def test_save_expression_then_load(tmp_path):
    shell, console = make_shell()
    assert shell.save("(1+2)*3", str(tmp_path / "expr.txt"), as_expression=True)
    assert shell.load(str(tmp_path / "expr"))
    assert "Expression Tree loaded:" in console.lines
    assert console.lines[-1] == "Result: 9.00"


def test_load_missing_file(tmp_path):
    shell, console = make_shell()
    assert not shell.load(str(tmp_path / "missing"))
    assert console.lines[-1].startswith("Error: Error loading expression tree from file")


def test_menu_loop():
    shell, console = make_shell("1", "2+2", "7", "abc", "5")
    shell.menu_loop()
    assert "Result: 4.00" in console.lines
    assert "Invalid choice. Please enter a number between 1 and 5." in console.lines
    assert "Invalid input. Please enter a number." in console.lines
    assert console.lines.count(MENU) == 4


def test_menu_loop_ends_on_eof():
    shell, console = make_shell()
    shell.menu_loop()
    assert console.prompts == ["Enter your choice: "]


def test_menu_load_asks_for_variables(tmp_path):
    expr_file = tmp_path / "stored.txt"
    expr_file.write_text("x^2\n", encoding="utf-8")
    shell, console = make_shell("4", str(tmp_path / "stored"), "3", "5")
    shell.menu_loop()
    assert console.prompts[:3] == ["Enter your choice: ", "Enter file name to load: ", "Enter value for x: "]
    assert console.lines[-2] == "Result: 9.00"


def test_main_eval(capsys):
    assert main(["eval", "x*2", "--var", "x=4"]) == 0
    out = capsys.readouterr().out
    assert "Expression Tree:" in out
    assert "Result: 8.00" in out


def test_main_eval_error_exit_status(capsys):
    assert main(["eval", "1/0"]) == 1
    assert "Error: Division by zero" in capsys.readouterr().out


def test_main_batch(tmp_path, capsys):
    (tmp_path / "in.txt").write_text("1+1\n", encoding="utf-8")
    assert main(["batch", str(tmp_path / "in.txt"), str(tmp_path / "out.txt")]) == 0
    assert (tmp_path / "out.txt").read_text(encoding="utf-8") == "1+1 = 2.00\n"


def test_main_save_and_load(tmp_path, capsys):
    target = tmp_path / "expr.txt"
    assert main(["save", "2^3^2", "--expression", "--file", str(target)]) == 0
    assert main(["load", str(target)]) == 0
    assert "Result: 64.00" in capsys.readouterr().out


def test_main_bad_variable_argument():
    with pytest.raises(SystemExit):
        main(["eval", "x", "--var", "x"])


def test_main_invalid_settings(monkeypatch, capsys):
    monkeypatch.setenv("EXPRTREE_LOG_LEVEL", "LOUD")
    assert main(["eval", "1"]) == 1
    assert "Invalid settings" in capsys.readouterr().err


def test_main_missing_env_file(tmp_path, capsys):
    assert main(["--env-file", str(tmp_path / "missing.env"), "eval", "1"]) == 1
    assert "Env file not found" in capsys.readouterr().err


def test_main_eval_deeply_nested_expression(capsys):
    assert main(["eval", "+".join(["1"] * 3000)]) == 1
    assert "Error: expression nested too deeply" in capsys.readouterr().out
