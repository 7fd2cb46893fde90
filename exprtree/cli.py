"""Command line and interactive menu for exprtree.

Usage:
    exprtree                          interactive menu
    exprtree eval "x + 1" --var x=5   evaluate one expression
    exprtree batch input output       evaluate a file, one expression per line
    exprtree save "(1+2)*3"           write the indented tree dump
    exprtree save "(1+2)*3" --expression --file expr.txt
    exprtree load expr                evaluate the expression stored in expr.txt

Variables that are not given with --var are asked for interactively.
"""

import argparse
import logging
import sys
from typing import Callable, Dict, List, Mapping, Optional, Tuple

from prompt_toolkit import PromptSession
from prompt_toolkit.history import FileHistory

from .batch import process_file
from .config import Settings, load_settings
from .errors import ConfigError, ExpressionError
from .evaluator import evaluate, format_result
from .serializer import load_tree, render_tree, save_expression, save_tree
from .tree import ExpressionNode, collect_variables, parse

logger = logging.getLogger(__name__)

MENU = (
    "Choose an option:\n"
    "1. Evaluate expression\n"
    "2. Batch process expressions from file\n"
    "3. Save expression tree to file\n"
    "4. Load expression tree from file\n"
    "5. Exit"
)
EXIT_CHOICE = 5


class Shell:
    """Runs the evaluate/batch/save/load commands against a prompt and an output sink.

    prompt and output default to a prompt_toolkit session and print; tests pass
    plain callables instead.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        prompt: Optional[Callable[[str], str]] = None,
        output: Callable[[str], None] = print,
    ):
        self.settings = settings or Settings()
        self._prompt = prompt
        self.output = output

    def ask(self, message: str) -> str:
        if self._prompt is None:
            session = PromptSession(history=FileHistory(self.settings.history_file))
            self._prompt = session.prompt
        return self._prompt(message)

    def ask_number(self, name: str) -> float:
        while True:
            raw = self.ask(f"Enter value for {name}: ").strip()
            try:
                return float(raw)
            except ValueError:
                self.output("Invalid input. Please enter a number.")

    def bind_variables(self, root: ExpressionNode, given: Optional[Mapping[str, float]] = None) -> Dict[str, float]:
        """Values for every variable in root, in first-seen order; missing ones are asked for."""
        given = given or {}
        bindings: Dict[str, float] = {}
        for name in collect_variables(root):
            bindings[name] = given[name] if name in given else self.ask_number(name)
        return bindings

    def _show_and_evaluate(self, root: ExpressionNode, heading: str, given: Optional[Mapping[str, float]]) -> None:
        self.output(heading)
        self.output(render_tree(root))
        bindings = self.bind_variables(root, given)
        self.output(f"Result: {format_result(evaluate(root, bindings))}")

    # --------------------------
    # Commands
    # --------------------------

    def evaluate_expression(self, text: str, given: Optional[Mapping[str, float]] = None) -> bool:
        try:
            root = parse(text.strip())
            self._show_and_evaluate(root, "Expression Tree:", given)
        except ExpressionError as e:
            self.output(f"Error: {e}")
            return False
        return True

    def batch(self, input_name: str, output_name: str) -> bool:
        input_path = self.settings.with_suffix(input_name)
        output_path = self.settings.with_suffix(output_name)
        try:
            process_file(input_path, output_path)
        except ExpressionError as e:
            self.output(f"Error: {e}")
            return False
        self.output(f"Batch processing completed. Results written to {output_path}")
        return True

    def save(self, text: str, path: Optional[str] = None, as_expression: bool = False) -> bool:
        path = path or self.settings.tree_file
        try:
            root = parse(text.strip())
            if as_expression:
                save_expression(text, path)
            else:
                save_tree(root, path)
        except ExpressionError as e:
            self.output(f"Error: {e}")
            return False
        self.output(f"Expression {'' if as_expression else 'tree '}saved to {path}")
        return True

    def load(self, filename: str, given: Optional[Mapping[str, float]] = None) -> bool:
        try:
            root = load_tree(self.settings.with_suffix(filename))
            self._show_and_evaluate(root, "Expression Tree loaded:", given)
        except ExpressionError as e:
            self.output(f"Error: {e}")
            return False
        return True

    # --------------------------
    # Interactive menu
    # --------------------------

    def run_choice(self, choice: str) -> bool:
        """Run one menu choice. Returns False when the menu should exit."""
        try:
            number = int(choice.strip())
        except ValueError:
            self.output("Invalid input. Please enter a number.")
            return True
        if number == 1:
            self.evaluate_expression(self.ask("Enter an expression: "))
        elif number == 2:
            input_name = self.ask("Enter input file name: ").strip()
            output_name = self.ask("Enter output file name: ").strip()
            self.batch(input_name, output_name)
        elif number == 3:
            self.save(self.ask("Enter an expression to save: "))
        elif number == 4:
            self.load(self.ask("Enter file name to load: ").strip())
        elif number == EXIT_CHOICE:
            return False
        else:
            self.output(f"Invalid choice. Please enter a number between 1 and {EXIT_CHOICE}.")
        return True

    def menu_loop(self) -> None:
        running = True
        while running:
            self.output(MENU)
            try:
                running = self.run_choice(self.ask("Enter your choice: "))
            except KeyboardInterrupt:
                self.output("^C")
            except EOFError:
                running = False


# --------------------------
# Entry point
# --------------------------

def _variable(text: str) -> Tuple[str, float]:
    """argparse type for NAME=VALUE."""
    name, sep, raw = text.partition("=")
    name = name.strip()
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"expected NAME=VALUE, got {text!r}")
    try:
        return name, float(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"value for {name} is not a number: {raw!r}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="exprtree", description="Parse and evaluate infix expressions.")
    parser.add_argument("--env-file", type=str, help="Path to a .env file with EXPRTREE_* settings.")
    sub = parser.add_subparsers(dest="command")

    p_eval = sub.add_parser("eval", help="Evaluate one expression.")
    p_eval.add_argument("expression")
    p_eval.add_argument("--var", type=_variable, action="append", default=[], metavar="NAME=VALUE",
                        help="Variable value (repeatable).")

    p_batch = sub.add_parser("batch", help="Evaluate every line of a file.")
    p_batch.add_argument("input")
    p_batch.add_argument("output")

    p_save = sub.add_parser("save", help="Save an expression tree.")
    p_save.add_argument("expression")
    p_save.add_argument("--file", type=str, help="Target file (default: the configured tree file).")
    p_save.add_argument("--expression", dest="as_expression", action="store_true",
                        help="Write the expression line that 'load' reads instead of the indented dump.")

    p_load = sub.add_parser("load", help="Evaluate the expression stored in a file.")
    p_load.add_argument("file")
    p_load.add_argument("--var", type=_variable, action="append", default=[], metavar="NAME=VALUE",
                        help="Variable value (repeatable).")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = load_settings(args.env_file)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=settings.logging_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    shell = Shell(settings)
    given = dict(getattr(args, "var", []))

    try:
        if args.command == "eval":
            ok = shell.evaluate_expression(args.expression, given)
        elif args.command == "batch":
            ok = shell.batch(args.input, args.output)
        elif args.command == "save":
            ok = shell.save(args.expression, args.file, args.as_expression)
        elif args.command == "load":
            ok = shell.load(args.file, given)
        else:
            shell.menu_loop()
            ok = True
    except (EOFError, KeyboardInterrupt):
        # input closed while asking for a variable
        logger.error("Input closed before all values were read")
        return 1
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
