"""RPN calculator -- a pushdown automaton built on symfsm.

Demonstrates:
- Using a list payload as the machine's stack
- Exact, wildcard and default transitions working together
- Actions reading the triggering symbol from ``machine.input_symbol``

Numbers are separated by spaces, operators apply to the two topmost
values and ``=`` prints the top of the stack:

    $ echo "3 4 + 2 *=" | python -m examples.rpn
    14

Run: python -m examples.rpn [--verbose]
"""

import argparse
import logging
import operator
from typing import Any, Callable

from symfsm import Machine

DIGITS = [str(d) for d in range(10)]

OPERATORS: dict[str, Callable[[Any, Any], Any]] = {
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
    "/": operator.truediv,
}


def build_calculator(
    stack: list[Any], report: Callable[[str], None] = print
) -> Machine:
    fsm = Machine("INIT", stack, states=["INIT", "BUILDING_NUMBER"])

    def begin_number(prev: str, new: str, payload: list[Any]) -> None:
        payload.append(fsm.input_symbol)

    def build_number(prev: str, new: str, payload: list[Any]) -> None:
        payload.append(payload.pop() + fsm.input_symbol)

    def end_number(prev: str, new: str, payload: list[Any]) -> None:
        payload.append(int(payload.pop()))

    def do_operator(prev: str, new: str, payload: list[Any]) -> None:
        right = payload.pop()
        left = payload.pop()
        payload.append(OPERATORS[fsm.input_symbol](left, right))

    def do_equal(prev: str, new: str, payload: list[Any]) -> None:
        report(str(payload.pop()))

    def error(prev: str, new: str, payload: list[Any]) -> None:
        report(f"This does not compute: {fsm.input_symbol}")

    fsm.set_default_transition("INIT", error)
    fsm.add_transition_any("INIT", "INIT")
    fsm.add_transition("=", "INIT", "INIT", do_equal)
    fsm.add_transitions(DIGITS, "INIT", "BUILDING_NUMBER", begin_number)
    fsm.add_transitions(DIGITS, "BUILDING_NUMBER", "BUILDING_NUMBER", build_number)
    fsm.add_transition(" ", "BUILDING_NUMBER", "INIT", end_number)
    fsm.add_transitions(list(OPERATORS), "INIT", "INIT", do_operator)
    return fsm


def main() -> None:
    parser = argparse.ArgumentParser(description="symfsm RPN calculator")
    parser.add_argument(
        "--verbose", action="store_true",
        help="Log every transition to stderr",
    )
    args = parser.parse_args()
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    stack: list[Any] = []
    fsm = build_calculator(stack)
    print("Expression:")
    fsm.process_list(input().rstrip())


if __name__ == "__main__":
    main()
