from __future__ import annotations

import os
import sys
import uuid
from pathlib import Path
from typing import Dict, Mapping, Optional, TextIO

from ..infra.contracts import ActionsIO
from ..infra.errors import InvalidInputError

TRUE_VALUES = ("true", "True", "TRUE")
FALSE_VALUES = ("false", "False", "FALSE")


def escape_data(value: str) -> str:
    return str(value).replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def escape_property(value: str) -> str:
    return escape_data(value).replace(":", "%3A").replace(",", "%2C")


def input_env_name(name: str) -> str:
    # Mirrors how the runner exports `with:` values to the step environment.
    return "INPUT_" + str(name).replace(" ", "_").upper()


class ActionsRuntime(ActionsIO):
    """GitHub Actions runtime toolkit: inputs, outputs, workflow commands and job summary.

    Everything goes through `env` and `out` so tests can run against a plain dict
    and a StringIO instead of the real runner environment.
    """

    def __init__(self, env: Optional[Mapping[str, str]] = None, out: Optional[TextIO] = None):
        self.env: Mapping[str, str] = env if env is not None else os.environ
        self.out: TextIO = out if out is not None else sys.stdout
        self.outputs: Dict[str, str] = {}
        self.exit_code = 0

    # --- inputs ---

    def get_input(self, name: str, *, trim: bool = True) -> str:
        val = str(self.env.get(input_env_name(name), "") or "")
        return val.strip() if trim else val

    def get_boolean_input(self, name: str, *, default: Optional[bool] = None) -> bool:
        val = self.get_input(name)
        if val in TRUE_VALUES:
            return True
        if val in FALSE_VALUES:
            return False
        if not val and default is not None:
            return default
        raise InvalidInputError(
            f'Input does not meet YAML 1.2 "Core Schema" specification: {name}\n'
            "Support boolean input list: `true | True | TRUE | false | False | FALSE`"
        )

    # --- outputs ---

    def set_output(self, name: str, value: str) -> None:
        value = "" if value is None else str(value)
        self.outputs[name] = value

        output_file = str(self.env.get("GITHUB_OUTPUT", "") or "").strip()
        if not output_file:
            self._emit(f"{os.linesep}::set-output name={escape_property(name)}::{escape_data(value)}")
            return

        delimiter = f"ghadelimiter_{uuid.uuid4()}"
        if delimiter in name or delimiter in value:
            raise InvalidInputError(f"Unexpected input: output {name!r} contains the delimiter {delimiter!r}")
        with Path(output_file).open("a", encoding="utf-8") as f:
            f.write(f"{name}<<{delimiter}{os.linesep}{value}{os.linesep}{delimiter}{os.linesep}")

    def set_secret(self, value: str) -> None:
        if value:
            self._emit(f"::add-mask::{escape_data(value)}")

    # --- logging ---

    def info(self, message: str) -> None:
        self._emit(str(message))

    def debug(self, message: str) -> None:
        self._emit(f"::debug::{escape_data(message)}")

    def warning(self, message: str) -> None:
        self._emit(f"::warning::{escape_data(message)}")

    def error(self, message: str) -> None:
        self._emit(f"::error::{escape_data(message)}")

    def set_failed(self, message: str) -> None:
        self.exit_code = 1
        self.error(message)

    # --- job summary ---

    def append_summary(self, markdown: str) -> None:
        summary_file = str(self.env.get("GITHUB_STEP_SUMMARY", "") or "").strip()
        if not summary_file:
            self.debug("GITHUB_STEP_SUMMARY not set; skipping job summary")
            return
        with Path(summary_file).open("a", encoding="utf-8") as f:
            f.write(markdown)

    def _emit(self, line: str) -> None:
        print(line, file=self.out, flush=True)
